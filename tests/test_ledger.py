"""
Unit tests for the points ledger
"""

import pytest

from refpoints.errors import NotFound, ValidationFailed
from refpoints.models import EarningType, GameOutcome, ReferralEarningType
from refpoints.repositories import list_referral_earnings
from refpoints.services.ledger import LedgerService


@pytest.fixture
def ledger():
    return LedgerService()


@pytest.fixture
async def referral_pair(make_user):
    referrer = await make_user("referrer@example.com")
    referred = await make_user("referred@example.com", referral_code=referrer.referral_code)
    return referrer, referred


@pytest.mark.asyncio
async def test_deposit_appends_player_entry(db_session, ledger, make_user):
    user = await make_user("player@example.com")

    entry = await ledger.record_deposit(db_session, user.id, 1000)

    assert entry.id is not None
    assert entry.earning_type == EarningType.DEPOSIT
    assert entry.points_earned == 1000


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -5, None, "abc", float("nan")])
async def test_deposit_rejects_bad_amounts(db_session, ledger, make_user, amount):
    user = await make_user("player@example.com")

    with pytest.raises(ValidationFailed):
        await ledger.record_deposit(db_session, user.id, amount)


@pytest.mark.asyncio
async def test_deposit_for_unknown_user(db_session, ledger):
    with pytest.raises(NotFound):
        await ledger.record_deposit(db_session, 999, 10)


@pytest.mark.asyncio
async def test_game_play_debits_player(db_session, ledger, make_user):
    user = await make_user("player@example.com")

    entry = await ledger.record_game_play(db_session, user.id, 50)

    assert entry.earning_type == EarningType.GAME_PLAYED
    assert entry.points_earned == -50


@pytest.mark.asyncio
async def test_lose_pays_referrer_commission(db_session, ledger, referral_pair):
    """Ставка 500, платформа 10%, реферер 2%: игрок −500, реферер +1"""
    referrer, referred = referral_pair

    settlement = await ledger.settle_game_outcome(db_session, referred.id, "lose", 500)

    assert settlement.player_entry.points_earned == -500
    assert settlement.referral_entry is not None
    assert settlement.referral_entry.referrer_id == referrer.id
    assert settlement.referral_entry.referred_id == referred.id
    assert settlement.referral_entry.earning_type == ReferralEarningType.GAME_PLAYED
    assert settlement.referral_entry.points_earned == 1
    assert settlement.transaction.outcome == GameOutcome.LOSE
    assert settlement.transaction.platform_earnings == 50
    assert settlement.transaction.referrer_earnings == 1
    assert len(settlement.entries) == 2


@pytest.mark.asyncio
async def test_lose_without_referrer(db_session, ledger, make_user):
    user = await make_user("solo@example.com")

    settlement = await ledger.settle_game_outcome(db_session, user.id, "lose", 200)

    assert settlement.referral_entry is None
    assert settlement.player_entry.points_earned == -200
    assert settlement.transaction.platform_earnings == 20
    assert settlement.transaction.referrer_earnings == 0


@pytest.mark.asyncio
async def test_win_credits_player_only(db_session, ledger, referral_pair):
    referrer, referred = referral_pair

    settlement = await ledger.settle_game_outcome(db_session, referred.id, "WIN", 300)

    assert settlement.player_entry.points_earned == 300
    assert settlement.referral_entry is None
    assert settlement.transaction.outcome == GameOutcome.WIN
    rows = await list_referral_earnings(
        db_session, referrer.id, earning_type=ReferralEarningType.GAME_PLAYED
    )
    assert rows == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "decision, stake", [("draw", 10), (None, 10), (1, 10), ("  ", 10), ("lose", 0), ("win", -1)]
)
async def test_settle_rejects_bad_input(db_session, ledger, make_user, decision, stake):
    user = await make_user("player@example.com")

    with pytest.raises(ValidationFailed):
        await ledger.settle_game_outcome(db_session, user.id, decision, stake)


@pytest.mark.asyncio
async def test_balance_is_sum_of_both_ledgers(db_session, ledger, referral_pair):
    referrer, referred = referral_pair
    await ledger.record_deposit(db_session, referred.id, 1000)
    await ledger.settle_game_outcome(db_session, referred.id, "lose", 500)

    assert await ledger.recompute_balance(db_session, referred.id) == 500
    # 100 за приглашение и 1 комиссии
    assert await ledger.recompute_balance(db_session, referrer.id) == 101


@pytest.mark.asyncio
async def test_recompute_balance_is_idempotent(db_session, ledger, make_user):
    user = await make_user("player@example.com")
    await ledger.record_deposit(db_session, user.id, 70)

    first = await ledger.recompute_balance(db_session, user.id)
    second = await ledger.recompute_balance(db_session, user.id)

    assert first == second == 70
    await db_session.refresh(user)
    assert user.balance == 70


@pytest.mark.asyncio
async def test_history_is_newest_first(db_session, ledger, make_user):
    user = await make_user("player@example.com")
    first = await ledger.record_deposit(db_session, user.id, 10)
    second = await ledger.record_game_play(db_session, user.id, 5)

    rows = await ledger.earnings_history(db_session, user.id, days=7)

    assert [row.id for row in rows] == [second.id, first.id]


@pytest.mark.asyncio
async def test_history_window_must_be_configured(db_session, ledger, make_user):
    user = await make_user("player@example.com")

    with pytest.raises(ValidationFailed):
        await ledger.earnings_history(db_session, user.id, days=3)


@pytest.mark.asyncio
async def test_low_level_appends(db_session, ledger, referral_pair):
    referrer, referred = referral_pair

    player = await ledger.record_player_earning(db_session, referred.id, EarningType.DEPOSIT, 15)
    commission = await ledger.record_referral_earning(
        db_session, referrer.id, referred.id, ReferralEarningType.GAME_PLAYED, 0.5
    )

    assert player.points_earned == 15
    assert commission.referrer_id == referrer.id
    # Кеш баланса не трогается до пересчёта.
    await db_session.refresh(referrer)
    assert referrer.balance == 0
    assert await ledger.recompute_balance(db_session, referrer.id) == 100.5


@pytest.mark.asyncio
async def test_low_level_appends_need_existing_users(db_session, ledger, make_user):
    user = await make_user("player@example.com")

    with pytest.raises(NotFound):
        await ledger.record_player_earning(db_session, 999, EarningType.DEPOSIT, 5)
    with pytest.raises(NotFound):
        await ledger.record_referral_earning(
            db_session, 999, user.id, ReferralEarningType.GAME_PLAYED, 5
        )
    with pytest.raises(NotFound):
        await ledger.record_referral_earning(
            db_session, user.id, 999, ReferralEarningType.GAME_PLAYED, 5
        )
    assert await ledger.earnings_history(db_session, user.id) == []


@pytest.mark.asyncio
async def test_referral_earning_requires_real_referral(db_session, ledger, make_user):
    alice = await make_user("alice@example.com")
    bob = await make_user("bob@example.com")
    carol = await make_user("carol@example.com", referral_code=alice.referral_code)

    # У Боба нет реферера, а Кэрол пригласила Алиса, а не Боб.
    with pytest.raises(ValidationFailed):
        await ledger.record_referral_earning(
            db_session, alice.id, bob.id, ReferralEarningType.GAME_PLAYED, 5
        )
    with pytest.raises(ValidationFailed):
        await ledger.record_referral_earning(
            db_session, bob.id, carol.id, ReferralEarningType.GAME_PLAYED, 5
        )

    rows = await list_referral_earnings(
        db_session, alice.id, earning_type=ReferralEarningType.GAME_PLAYED
    )
    assert rows == []
    assert await list_referral_earnings(db_session, bob.id) == []


@pytest.mark.asyncio
async def test_outcome_is_stored_as_plain_value(db_session, ledger, make_user):
    user = await make_user("solo@example.com")
    await ledger.record_deposit(db_session, user.id, 100)

    settlement = await ledger.settle_game_outcome(db_session, user.id, "Lose", 40)

    assert GameOutcome("lose") is GameOutcome.LOSE
    assert [outcome.value for outcome in GameOutcome] == ["win", "lose"]
    assert type(settlement.transaction.outcome) is str
    assert settlement.transaction.outcome == "lose"
