"""Tests for /api/v1/data — export, import and backups."""

import json


async def test_export_is_attachment(client, decision_body):
    await client.post("/api/v1/decisions", json=decision_body())
    response = await client.get("/api/v1/data/export")
    assert response.status_code == 200
    assert "attachment" in response.headers["content-disposition"]
    envelope = response.json()
    assert envelope["version"] == 1
    assert len(envelope["decisions"]) == 1


async def test_export_import_replace(client, decision_body):
    await client.post("/api/v1/decisions", json=decision_body(title="Keep me"))
    exported = (await client.get("/api/v1/data/export")).content
    await client.post("/api/v1/decisions", json=decision_body(title="Extra"))

    response = await client.post("/api/v1/data/import?mode=replace", content=exported)
    assert response.status_code == 200
    assert response.json()["imported"] == 1
    titles = [d["title"] for d in (await client.get("/api/v1/decisions")).json()]
    assert titles == ["Keep me"]

    backups = (await client.get("/api/v1/data/backups")).json()
    assert backups[0]["reason"] == "Before import (replace)"
    assert backups[0]["count"] == 2


async def test_import_bad_json_is_400(client):
    response = await client.post("/api/v1/data/import?mode=merge", content=b"{oops")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_JSON"


async def test_import_all_invalid_is_400(client):
    body = json.dumps([{"title": "broken"}])
    response = await client.post("/api/v1/data/import?mode=replace", content=body)
    assert response.status_code == 400
    assert response.json()["error"]["details"][0].startswith("Decision 1 (broken):")


async def test_backup_restore_and_delete(client, decision_body):
    await client.post("/api/v1/decisions", json=decision_body(title="Snap"))
    backup = (await client.post("/api/v1/data/backups")).json()
    assert backup["reason"] == "Manual backup"

    await client.post("/api/v1/decisions", json=decision_body(title="Later"))
    restored = await client.post(f"/api/v1/data/backups/{backup['id']}/restore")
    assert restored.json() == {"restored": 1}
    titles = [d["title"] for d in (await client.get("/api/v1/decisions")).json()]
    assert titles == ["Snap"]

    assert (await client.delete(f"/api/v1/data/backups/{backup['id']}")).status_code == 204
    assert (await client.delete(f"/api/v1/data/backups/{backup['id']}")).status_code == 404


async def test_restore_unknown_backup_is_404(client):
    response = await client.post("/api/v1/data/backups/missing/restore")
    assert response.status_code == 404
