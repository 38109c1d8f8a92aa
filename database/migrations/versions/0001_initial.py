"""Initial refpoints schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

Creates users, referral links, both earning ledgers, game transactions,
platform settings and refresh tokens.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

earning_type = sa.Enum("DEPOSIT", "GAME_PLAYED", name="earningtype")
referral_earning_type = sa.Enum("NEW_REFERRAL", "GAME_PLAYED", name="referralearningtype")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("referral_code", sa.String(32), nullable=True),
        sa.Column("referred_by", sa.Integer(), nullable=True),
        sa.Column("balance", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["referred_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_referral_code", "users", ["referral_code"], unique=True)
    op.create_index("ix_users_referred_by", "users", ["referred_by"])
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "referrals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("referrer_id", sa.Integer(), nullable=False),
        sa.Column("referred_id", sa.Integer(), nullable=False),
        sa.Column("signup_bonus", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["referrer_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["referred_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_referrals_referrer_id", "referrals", ["referrer_id"])
    op.create_index("ix_referrals_referred_id", "referrals", ["referred_id"], unique=True)
    op.create_index("ix_referrals_created_at", "referrals", ["created_at"])

    op.create_table(
        "earnings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("earning_type", earning_type, nullable=False),
        sa.Column("points_earned", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_earnings_user_id", "earnings", ["user_id"])
    op.create_index("ix_earnings_created_at", "earnings", ["created_at"])

    op.create_table(
        "referral_earnings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("referrer_id", sa.Integer(), nullable=False),
        sa.Column("referred_id", sa.Integer(), nullable=False),
        sa.Column("earning_type", referral_earning_type, nullable=False),
        sa.Column("points_earned", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["referrer_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["referred_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_referral_earnings_referrer_id", "referral_earnings", ["referrer_id"])
    op.create_index("ix_referral_earnings_referred_id", "referral_earnings", ["referred_id"])
    op.create_index("ix_referral_earnings_created_at", "referral_earnings", ["created_at"])

    op.create_table(
        "game_transactions",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("game_name", sa.String(64), nullable=False),
        sa.Column("outcome", sa.String(8), nullable=False),
        sa.Column("points_spent", sa.Float(), nullable=False),
        sa.Column("platform_earnings", sa.Float(), nullable=False),
        sa.Column("referrer_earnings", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_game_transactions_user_id", "game_transactions", ["user_id"])
    op.create_index("ix_game_transactions_outcome", "game_transactions", ["outcome"])
    op.create_index("ix_game_transactions_created_at", "game_transactions", ["created_at"])

    op.create_table(
        "platform_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("new_referral_points", sa.Float(), nullable=False),
        sa.Column("platform_earn_percentage", sa.Float(), nullable=False),
        sa.Column("referral_earn_percentage", sa.Float(), nullable=False),
        sa.Column("duration_filter_data", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "refresh_tokens",
        sa.Column("jti", sa.String(64), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("jti"),
    )
    op.create_index("ix_refresh_tokens_user_id", "refresh_tokens", ["user_id"])
    op.create_index("ix_refresh_tokens_created_at", "refresh_tokens", ["created_at"])


def downgrade() -> None:
    op.drop_table("refresh_tokens")
    op.drop_table("platform_settings")
    op.drop_table("game_transactions")
    op.drop_table("referral_earnings")
    op.drop_table("earnings")
    op.drop_table("referrals")
    op.drop_table("users")
    referral_earning_type.drop(op.get_bind(), checkfirst=True)
    earning_type.drop(op.get_bind(), checkfirst=True)
