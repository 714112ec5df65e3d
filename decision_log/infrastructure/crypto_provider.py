"""Crypto Provider — passphrase-based encryption of the remote access token.

Invariants:
    - Key = PBKDF2-HMAC-SHA256(passphrase, 16-byte random salt, >= 100,000 iterations), 256 bits
    - Cipher = AES-GCM with a fresh 12-byte random nonce per encryption
    - Decryption failure (wrong passphrase, tampered salt/nonce/ciphertext) -> CryptoError,
      never a partial plaintext
    - Persisted form is three parallel int lists {salt, iv, encrypted}

Design Decisions:
    - cryptography's AESGCM/PBKDF2HMAC over hand-rolled primitives
    - Key derivation is CPU-bound: derive/encrypt/decrypt run in asyncio.to_thread
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from decision_log.core.errors import CryptoError

logger = logging.getLogger(__name__)

MIN_ITERATIONS = 100_000
SALT_BYTES = 16
NONCE_BYTES = 12
KEY_BYTES = 32


@dataclass(frozen=True)
class EncryptedToken:
    salt: bytes
    nonce: bytes
    ciphertext: bytes

    def to_dict(self) -> dict[str, list[int]]:
        return {
            "salt": list(self.salt),
            "iv": list(self.nonce),
            "encrypted": list(self.ciphertext),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EncryptedToken":
        try:
            return cls(
                salt=bytes(data["salt"]),
                nonce=bytes(data["iv"]),
                ciphertext=bytes(data["encrypted"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CryptoError("Stored token is malformed") from e


class CryptoProvider:
    """Encrypts and decrypts short secrets under a user passphrase."""

    def __init__(self, iterations: int = MIN_ITERATIONS):
        if iterations < MIN_ITERATIONS:
            raise ValueError(f"iterations must be >= {MIN_ITERATIONS}")
        self.iterations = iterations

    def _derive_key(self, passphrase: str, salt: bytes) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_BYTES,
            salt=salt,
            iterations=self.iterations,
        )
        return kdf.derive(passphrase.encode("utf-8"))

    def _encrypt_sync(self, plaintext: str, passphrase: str) -> EncryptedToken:
        salt = os.urandom(SALT_BYTES)
        nonce = os.urandom(NONCE_BYTES)
        key = self._derive_key(passphrase, salt)
        ciphertext = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
        return EncryptedToken(salt=salt, nonce=nonce, ciphertext=ciphertext)

    def _decrypt_sync(self, token: EncryptedToken, passphrase: str) -> str:
        key = self._derive_key(passphrase, token.salt)
        try:
            plaintext = AESGCM(key).decrypt(token.nonce, token.ciphertext, None)
        except (InvalidTag, ValueError) as e:
            logger.warning("Token decryption failed", extra={"operation": "decrypt"})
            raise CryptoError() from e
        return plaintext.decode("utf-8")

    async def encrypt(self, plaintext: str, passphrase: str) -> EncryptedToken:
        return await asyncio.to_thread(self._encrypt_sync, plaintext, passphrase)

    async def decrypt(self, token: EncryptedToken, passphrase: str) -> str:
        return await asyncio.to_thread(self._decrypt_sync, token, passphrase)
