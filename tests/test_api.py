"""
HTTP tests for the refpoints API
"""

import pytest

PASSWORD = "secret123"


async def signup(client, email, referral_code=None):
    params = {"referral_code": referral_code} if referral_code else None
    response = await client.post(
        "/register", json={"email": email, "password": PASSWORD}, params=params
    )
    assert response.status_code == 201, response.text
    return response.json()["user"]


async def login(client, email):
    """Логинится и возвращает заголовки с access-токеном; cookie-хранилище очищается."""
    response = await client.post("/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    tokens = {
        "access": response.cookies.get("access_token"),
        "refresh": response.cookies.get("refresh_token"),
    }
    client.cookies.clear()
    return {"Authorization": f"Bearer {tokens['access']}"}, tokens


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_register_returns_public_user(client):
    user = await signup(client, "alice@example.com")

    assert user["email"] == "alice@example.com"
    assert len(user["referral_code"]) == 6
    assert "password_hash" not in user


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    await signup(client, "alice@example.com")

    response = await client.post(
        "/register", json={"email": "alice@example.com", "password": PASSWORD}
    )

    assert response.status_code == 409
    assert response.json() == {"status": "fail", "message": "alice@example.com already exists"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [{"email": "not-an-email", "password": PASSWORD}, {"email": "a@example.com", "password": "1"}, {}],
)
async def test_register_invalid_body_is_400(client, body):
    response = await client.post("/register", json=body)

    assert response.status_code == 400
    assert response.json()["status"] == "fail"
    assert response.json()["message"].startswith("Invalid input data.")


@pytest.mark.asyncio
async def test_register_with_unknown_code(client):
    response = await client.post(
        "/referral/register/ffffff", json={"email": "new@example.com", "password": PASSWORD}
    )

    assert response.status_code == 404
    assert response.json()["message"] == "referral code not found"


@pytest.mark.asyncio
async def test_register_via_referral_path(client):
    referrer = await signup(client, "ref@example.com")

    response = await client.post(
        f"/referral/register/{referrer['referral_code']}",
        json={"email": "new@example.com", "password": PASSWORD},
    )

    assert response.status_code == 201
    assert response.json()["user"]["referred_by"] == referrer["id"]


@pytest.mark.asyncio
async def test_login_sets_cookies(client):
    await signup(client, "alice@example.com")

    response = await client.post("/login", json={"email": "alice@example.com", "password": PASSWORD})

    assert response.status_code == 200
    assert response.cookies.get("access_token")
    assert response.cookies.get("refresh_token")
    # Cookie-сессия работает без заголовка Authorization.
    me = response.json()["user"]["id"]
    balance = await client.get(f"/game/balance/{me}")
    assert balance.status_code == 200


@pytest.mark.asyncio
async def test_login_wrong_password(client):
    await signup(client, "alice@example.com")

    response = await client.post("/login", json={"email": "alice@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["status"] == "fail"


@pytest.mark.asyncio
async def test_protected_routes_need_token(client):
    assert (await client.get("/game/balance/1")).status_code == 401
    assert (await client.get("/cms/settings")).status_code == 401
    response = await client.get("/referral/top", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_rotation(client):
    await signup(client, "alice@example.com")
    headers, tokens = await login(client, "alice@example.com")

    client.cookies.set("refresh_token", tokens["refresh"])
    rotated = await client.post("/refresh")
    assert rotated.status_code == 200
    new_refresh = rotated.cookies.get("refresh_token")
    assert new_refresh and new_refresh != tokens["refresh"]

    client.cookies.clear()
    client.cookies.set("refresh_token", tokens["refresh"])
    reused = await client.post("/refresh")
    assert reused.status_code == 403

    client.cookies.clear()
    assert (await client.post("/refresh")).status_code == 401


@pytest.mark.asyncio
async def test_logout(client):
    await signup(client, "alice@example.com")
    _, tokens = await login(client, "alice@example.com")

    client.cookies.set("refresh_token", tokens["refresh"])
    assert (await client.post("/logout")).status_code == 200

    client.cookies.clear()
    client.cookies.set("refresh_token", tokens["refresh"])
    assert (await client.post("/refresh")).status_code == 403


@pytest.mark.asyncio
async def test_game_flow_with_commission(client):
    referrer = await signup(client, "ref@example.com")
    player = await signup(client, "player@example.com", referrer["referral_code"])
    headers, _ = await login(client, "player@example.com")

    deposit = await client.post(f"/cms/balance/{player['id']}", json={"Balance": 1000}, headers=headers)
    assert deposit.status_code == 201
    assert deposit.json()["earning"]["earning_type"] == "Deposit"

    decision = await client.post(
        f"/game/decision/{player['id']}",
        json={"decision": "lose", "stake_amount": 500, "game_name": "dice"},
        headers=headers,
    )
    assert decision.status_code == 201
    body = decision.json()
    assert body["earning"]["points_earned"] == -500
    assert body["referral_earning"]["points_earned"] == 1
    assert body["transaction"]["game_name"] == "dice"

    player_balance = await client.get(f"/game/balance/{player['id']}", headers=headers)
    referrer_balance = await client.get(f"/game/balance/{referrer['id']}", headers=headers)
    assert player_balance.json() == {"current_balance": 500}
    assert referrer_balance.json() == {"current_balance": 101}

    history = await client.get(f"/game/history/{player['id']}", params={"days": 7}, headers=headers)
    assert [row["points_earned"] for row in history.json()["earnings"]] == [-500, 1000]


@pytest.mark.asyncio
async def test_game_play_debits_stake(client):
    player = await signup(client, "player@example.com")
    headers, _ = await login(client, "player@example.com")

    response = await client.post(f"/game/play/{player['id']}", json={"balance": 25}, headers=headers)

    assert response.status_code == 201
    assert response.json()["earning"]["points_earned"] == -25


@pytest.mark.asyncio
async def test_game_writes_only_for_owner(client):
    await signup(client, "alice@example.com")
    bob = await signup(client, "bob@example.com")
    headers, _ = await login(client, "alice@example.com")

    response = await client.post(
        f"/game/decision/{bob['id']}",
        json={"decision": "win", "stake_amount": 10},
        headers=headers,
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_bad_decision_and_window(client):
    player = await signup(client, "player@example.com")
    headers, _ = await login(client, "player@example.com")

    decision = await client.post(
        f"/game/decision/{player['id']}",
        json={"decision": "draw", "stake_amount": 10},
        headers=headers,
    )
    history = await client.get(f"/game/history/{player['id']}", params={"days": 5}, headers=headers)

    assert decision.status_code == 400
    assert history.status_code == 400
    assert history.json()["message"] == "days must be one of [1, 7, 30]"


@pytest.mark.asyncio
async def test_unknown_user_is_404(client):
    await signup(client, "alice@example.com")
    headers, _ = await login(client, "alice@example.com")

    assert (await client.get("/game/balance/999", headers=headers)).status_code == 404
    assert (await client.get("/referral/list/999", headers=headers)).status_code == 404
    response = await client.post("/cms/balance/999", json={"Balance": 5}, headers=headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_referral_endpoints(client):
    referrer = await signup(client, "ref@example.com")
    await signup(client, "one@example.com", referrer["referral_code"])
    await signup(client, "two@example.com", referrer["referral_code"])
    headers, _ = await login(client, "ref@example.com")

    generated = await client.post("/referral/generate", headers=headers)
    assert generated.json()["referral_code"] == referrer["referral_code"]

    valid = await client.get(f"/referral/validate/{referrer['referral_code']}", headers=headers)
    invalid = await client.get("/referral/validate/zzzzzz", headers=headers)
    assert valid.status_code == 200
    assert invalid.status_code == 404

    history = await client.get(
        f"/referral/history/{referrer['id']}", params={"filter": "New_Referral"}, headers=headers
    )
    assert len(history.json()["referral_history"]) == 2

    listing = await client.get(f"/referral/list/{referrer['id']}", headers=headers)
    assert listing.json()["total_points"] == 200
    assert {item["referred_user"] for item in listing.json()["referrals"]} == {
        "one@example.com",
        "two@example.com",
    }

    top = await client.get("/referral/top", params={"limit": 5}, headers=headers)
    assert top.json()["top_referrals"][0]["referrer_id"] == referrer["id"]


@pytest.mark.asyncio
async def test_empty_referral_list(client):
    user = await signup(client, "alone@example.com")
    headers, _ = await login(client, "alone@example.com")

    response = await client.get(f"/referral/list/{user['id']}", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"referrals": [], "total_points": 0}


@pytest.mark.asyncio
async def test_cms_settings(client):
    await signup(client, "admin@example.com")
    headers, _ = await login(client, "admin@example.com")

    current = await client.get("/cms/settings", headers=headers)
    assert current.status_code == 200
    assert current.json()["duration_filter_data"] == [1, 7, 30]

    payload = {
        "new_referral_points": 50,
        "platform_earn_percentage": 15,
        "referral_earn_percentage": 3,
        "duration_filter_data": [2, 5],
    }
    updated = await client.put("/cms/settings", json=payload, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["new_referral_points"] == 50

    invalid = await client.put(
        "/cms/settings", json={**payload, "platform_earn_percentage": 150}, headers=headers
    )
    assert invalid.status_code == 400


@pytest.mark.asyncio
async def test_cms_writes_need_session(client):
    player = await signup(client, "player@example.com")
    client.cookies.clear()
    payload = {
        "new_referral_points": 1,
        "platform_earn_percentage": 1,
        "referral_earn_percentage": 1,
        "duration_filter_data": [1],
    }

    assert (await client.put("/cms/settings", json=payload)).status_code == 401
    deposit = await client.post(f"/cms/balance/{player['id']}", json={"Balance": 1000})
    assert deposit.status_code == 401

    headers, _ = await login(client, "player@example.com")
    settings = await client.get("/cms/settings", headers=headers)
    assert settings.json()["new_referral_points"] == 100
    balance = await client.get(f"/game/balance/{player['id']}", headers=headers)
    assert balance.status_code == 200
    assert balance.json()["current_balance"] == 0
