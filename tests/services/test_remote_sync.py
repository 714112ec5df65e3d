"""Tests for RemoteSync against an in-memory Gist API served over httpx.MockTransport."""

import json

import httpx
import pytest

from decision_log.core.errors import (
    ImportFormatError, InvalidInputError, MissingCredentialError, RecordValidationError,
)
from decision_log.infrastructure.crypto_provider import CryptoProvider
from decision_log.infrastructure.gist_client import GIST_FILENAME, GistClient
from decision_log.services.credential_vault import CredentialVault, SessionCredential
from decision_log.services.remote_sync import BEFORE_SYNC, RemoteSync


class FakeGistApi:
    """Just enough of the Gist API: /user and gist create/patch/get."""

    def __init__(self, valid_token: str = "tok"):
        self.valid_token = valid_token
        self.gists: dict[str, dict] = {}
        self.calls: list[tuple[str, str]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.method, request.url.path))
        if request.headers["Authorization"] != f"token {self.valid_token}":
            return httpx.Response(401, json={"message": "Bad credentials"})
        path = request.url.path
        if path == "/user":
            return httpx.Response(200, json={"login": "me"})
        if path == "/gists" and request.method == "POST":
            gist_id = f"g{len(self.gists) + 1}"
            self.gists[gist_id] = {
                "id": gist_id,
                "files": json.loads(request.content)["files"],
                "updated_at": "2024-03-01T00:00:00Z",
            }
            return httpx.Response(201, json=self.gists[gist_id])
        gist_id = path.rsplit("/", 1)[-1]
        if gist_id not in self.gists:
            return httpx.Response(404, json={"message": "Not Found"})
        if request.method == "PATCH":
            self.gists[gist_id]["files"].update(json.loads(request.content)["files"])
        return httpx.Response(200, json=self.gists[gist_id])

    def put_file(self, gist_id: str, content: str) -> None:
        self.gists[gist_id] = {
            "id": gist_id,
            "files": {GIST_FILENAME: {"content": content}},
            "updated_at": "2024-03-02T00:00:00Z",
        }


@pytest.fixture
def api():
    return FakeGistApi()


@pytest.fixture
def credential():
    return SessionCredential("tok")


@pytest.fixture
def vault(kv_store):
    return CredentialVault(kv_store, CryptoProvider())


@pytest.fixture
def sync(api, vault, repo, backups, credential):
    client = GistClient(
        client=httpx.AsyncClient(
            transport=httpx.MockTransport(api.handler), base_url="https://gist.test",
        ),
    )
    return RemoteSync(client, vault, repo, backups, credential)


async def test_verify_token(sync):
    assert await sync.verify_token() is True
    assert await sync.verify_token("wrong") is False


async def test_push_creates_then_updates(sync, api, vault, repo, make_decision):
    await repo.bulk_insert([make_decision(id="a")])
    gist_id = await sync.push()
    assert await vault.get_gist_id() == gist_id

    await repo.bulk_insert([make_decision(id="b")])
    assert await sync.push() == gist_id
    assert ("PATCH", f"/gists/{gist_id}") in api.calls

    document = json.loads(api.gists[gist_id]["files"][GIST_FILENAME]["content"])
    assert {r["id"] for r in document["decisions"]} == {"a", "b"}


async def test_push_without_credential(sync, credential):
    credential.clear()
    with pytest.raises(MissingCredentialError):
        await sync.push()


async def test_pull_reads_without_touching_local(sync, api, repo, make_decision):
    await repo.bulk_insert([make_decision(id="local")])
    api.put_file("g9", json.dumps({
        "version": 1, "exportedAt": "x", "decisions": [make_decision(id="remote").to_record()],
    }))
    pulled = await sync.pull(gist_id="g9")
    assert [d.id for d in pulled.decisions] == ["remote"]
    assert pulled.updated_at == "2024-03-02T00:00:00Z"
    assert await repo.existing_ids() == {"local"}


async def test_pull_needs_a_gist_id(sync):
    with pytest.raises(InvalidInputError):
        await sync.pull()


async def test_pull_missing_file(sync, api):
    api.gists["g9"] = {"id": "g9", "files": {"other.txt": {"content": "hi"}}}
    with pytest.raises(ImportFormatError, match="Backup file not found in gist"):
        await sync.pull(gist_id="g9")


async def test_pull_rejects_any_invalid_record(sync, api, make_decision):
    api.put_file("g9", json.dumps([
        make_decision(id="ok").to_record(), {"id": "bad", "title": "Broken"},
    ]))
    with pytest.raises(RecordValidationError) as exc_info:
        await sync.pull(gist_id="g9")
    assert len(exc_info.value.errors) == 1


async def test_sync_from_gist_replaces_after_backup(sync, api, repo, backups, make_decision):
    await repo.bulk_insert([make_decision(id="local")])
    api.put_file("g9", json.dumps([
        make_decision(id="r1").to_record(), make_decision(id="r2").to_record(),
    ]))
    assert await sync.sync_from_gist(gist_id="g9") == 2
    assert await repo.existing_ids() == {"r1", "r2"}
    snapshot = (await backups.list_backups())[0]
    assert snapshot.reason == BEFORE_SYNC
    assert [r["id"] for r in snapshot.decisions] == ["local"]
