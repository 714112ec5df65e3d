"""Credential Vault — encrypted access-token storage and the in-process session credential.

Invariants:
    - The plaintext token is never written to any store; only the EncryptedToken form is
    - unlock returns None when nothing is stored and raises CryptoError on a bad passphrase
    - clear removes both the encrypted token and the remembered gist id
    - SessionCredential is owned by its caller; there is no module-level token slot

Design Decisions:
    - Gist id stored next to the token: a remote document belongs to one credential
"""

import logging

from decision_log.core.errors import MissingCredentialError
from decision_log.core.repository_protocols import KeyValueStore
from decision_log.infrastructure.crypto_provider import CryptoProvider, EncryptedToken

logger = logging.getLogger(__name__)

TOKEN_KEY = "decision-log-encrypted-token"
GIST_ID_KEY = "decision-log-gist-id"


class SessionCredential:
    """Holds the unlocked token for the lifetime of one process/session."""

    def __init__(self, token: str | None = None):
        self._token = token

    def set(self, token: str) -> None:
        self._token = token

    def get(self) -> str | None:
        return self._token

    def clear(self) -> None:
        self._token = None

    def require(self) -> str:
        if not self._token:
            raise MissingCredentialError()
        return self._token


class CredentialVault:
    """Encrypted token + gist id persisted in the key-value store."""

    def __init__(self, store: KeyValueStore, crypto: CryptoProvider):
        self.store = store
        self.crypto = crypto

    async def save_token(self, token: str, passphrase: str) -> None:
        encrypted = await self.crypto.encrypt(token, passphrase)
        await self.store.set(TOKEN_KEY, encrypted.to_dict())
        logger.info("Access token saved (encrypted)", extra={"operation": "save_token"})

    async def has_encrypted_token(self) -> bool:
        return await self.store.get(TOKEN_KEY) is not None

    async def unlock(self, passphrase: str) -> str | None:
        stored = await self.store.get(TOKEN_KEY)
        if stored is None:
            return None
        return await self.crypto.decrypt(EncryptedToken.from_dict(stored), passphrase)

    async def clear(self) -> None:
        await self.store.delete(TOKEN_KEY)
        await self.store.delete(GIST_ID_KEY)
        logger.info("Stored credentials cleared", extra={"operation": "clear_token"})

    async def get_gist_id(self) -> str | None:
        return await self.store.get(GIST_ID_KEY)

    async def set_gist_id(self, gist_id: str) -> None:
        await self.store.set(GIST_ID_KEY, gist_id)
