"""Tests for CredentialVault and SessionCredential."""

import pytest

from decision_log.core.errors import CryptoError, MissingCredentialError
from decision_log.infrastructure.crypto_provider import CryptoProvider
from decision_log.services.credential_vault import (
    GIST_ID_KEY, TOKEN_KEY, CredentialVault, SessionCredential,
)


@pytest.fixture
def vault(kv_store):
    return CredentialVault(kv_store, CryptoProvider())


async def test_save_then_unlock(vault, kv_store):
    await vault.save_token("ghp_secret", "correct horse")
    stored = await kv_store.get(TOKEN_KEY)
    assert set(stored) == {"salt", "iv", "encrypted"}
    assert "ghp_secret" not in str(stored)
    assert await vault.has_encrypted_token() is True
    assert await vault.unlock("correct horse") == "ghp_secret"


async def test_wrong_passphrase(vault):
    await vault.save_token("ghp_secret", "correct horse")
    with pytest.raises(CryptoError):
        await vault.unlock("battery staple")


async def test_unlock_with_nothing_stored(vault):
    assert await vault.has_encrypted_token() is False
    assert await vault.unlock("anything") is None


async def test_clear_removes_token_and_gist_id(vault, kv_store):
    await vault.save_token("ghp_secret", "correct horse")
    await vault.set_gist_id("g1")
    assert await vault.get_gist_id() == "g1"

    await vault.clear()
    assert await kv_store.get(TOKEN_KEY) is None
    assert await kv_store.get(GIST_ID_KEY) is None


def test_session_credential_lifecycle():
    credential = SessionCredential()
    with pytest.raises(MissingCredentialError):
        credential.require()
    credential.set("tok")
    assert credential.require() == "tok"
    credential.clear()
    assert credential.get() is None
