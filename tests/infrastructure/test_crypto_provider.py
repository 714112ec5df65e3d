"""Tests for passphrase encryption of the access token."""

import pytest

from decision_log.core.errors import CryptoError
from decision_log.infrastructure.crypto_provider import CryptoProvider, EncryptedToken


@pytest.fixture
def crypto():
    return CryptoProvider()


async def test_encrypt_then_decrypt(crypto):
    encrypted = await crypto.encrypt("ghp_secret", "correct horse")
    assert await crypto.decrypt(encrypted, "correct horse") == "ghp_secret"


async def test_wire_shape_sizes(crypto):
    encrypted = await crypto.encrypt("ghp_secret", "pw-123456")
    data = encrypted.to_dict()
    assert len(data["salt"]) == 16
    assert len(data["iv"]) == 12
    assert all(isinstance(b, int) for b in data["encrypted"])
    assert EncryptedToken.from_dict(data) == encrypted


async def test_fresh_salt_and_nonce_each_time(crypto):
    a = await crypto.encrypt("same", "pw-123456")
    b = await crypto.encrypt("same", "pw-123456")
    assert a.salt != b.salt
    assert a.nonce != b.nonce


async def test_wrong_passphrase_raises(crypto):
    encrypted = await crypto.encrypt("ghp_secret", "right-pass")
    with pytest.raises(CryptoError):
        await crypto.decrypt(encrypted, "wrong-pass")


async def test_tampered_ciphertext_raises(crypto):
    encrypted = await crypto.encrypt("ghp_secret", "right-pass")
    flipped = bytes([encrypted.ciphertext[0] ^ 0x01]) + encrypted.ciphertext[1:]
    tampered = EncryptedToken(encrypted.salt, encrypted.nonce, flipped)
    with pytest.raises(CryptoError):
        await crypto.decrypt(tampered, "right-pass")


def test_malformed_stored_token():
    with pytest.raises(CryptoError):
        EncryptedToken.from_dict({"salt": [1, 2]})


def test_iteration_floor():
    with pytest.raises(ValueError):
        CryptoProvider(iterations=1000)
