"""Tests for /api/v1/sync — token vault and Gist calls."""

import httpx


async def test_status_before_anything(client):
    status = (await client.get("/api/v1/sync/status")).json()
    assert status == {"has_encrypted_token": False, "unlocked": False, "gist_id": None}


async def test_save_token_unlocks_session(client, credential):
    response = await client.post(
        "/api/v1/sync/token", json={"token": " ghp_x ", "passphrase": "long enough"},
    )
    assert response.status_code == 204
    assert credential.get() == "ghp_x"

    credential.clear()
    unlocked = await client.post("/api/v1/sync/unlock", json={"passphrase": "long enough"})
    assert unlocked.json() == {"unlocked": True}
    assert credential.get() == "ghp_x"


async def test_unlock_wrong_passphrase_is_400(client, credential):
    await client.post(
        "/api/v1/sync/token", json={"token": "ghp_x", "passphrase": "long enough"},
    )
    credential.clear()
    response = await client.post("/api/v1/sync/unlock", json={"passphrase": "wrong one"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CRYPTO_ERROR"
    assert credential.get() is None


async def test_unlock_with_nothing_stored_is_404(client):
    response = await client.post("/api/v1/sync/unlock", json={"passphrase": "anything"})
    assert response.status_code == 404


async def test_short_passphrase_rejected(client):
    response = await client.post(
        "/api/v1/sync/token", json={"token": "ghp_x", "passphrase": "short"},
    )
    assert response.status_code == 400


async def test_push_without_token_is_401(client):
    response = await client.post("/api/v1/sync/push")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "CREDENTIAL_MISSING"


async def test_push_creates_gist_and_remembers_id(client, credential, gist_requests):
    credential.set("ghp_x")
    gist_requests["respond"] = lambda request: httpx.Response(201, json={"id": "g42"})

    response = await client.post("/api/v1/sync/push")
    assert response.json() == {"gistId": "g42"}
    sent = gist_requests["seen"][0]
    assert (sent.method, sent.url.path) == ("POST", "/gists")
    assert sent.headers["Authorization"] == "token ghp_x"

    status = (await client.get("/api/v1/sync/status")).json()
    assert status["gist_id"] == "g42"


async def test_verify_reports_invalid_token(client, gist_requests):
    gist_requests["respond"] = lambda request: httpx.Response(401, json={})
    response = await client.post("/api/v1/sync/verify", json={"token": "bad"})
    assert response.json() == {"valid": False}


async def test_remote_failure_is_502(client, credential, gist_requests):
    credential.set("ghp_x")
    gist_requests["respond"] = lambda request: httpx.Response(500, text="down")
    response = await client.post("/api/v1/sync/push")
    assert response.status_code == 502
    assert response.json()["error"]["details"] == {"status_code": 500}
