"""Sync Schemas — credential and Gist sync request/response bodies.

Invariants:
    - Passphrases and tokens are never echoed back in any response
    - A token in a request body overrides the unlocked session credential for that call
"""

from pydantic import BaseModel, Field, field_validator


class TokenSave(BaseModel):
    token: str = Field(min_length=1)
    passphrase: str = Field(min_length=8)

    @field_validator("token")
    @classmethod
    def strip_token(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("token cannot be empty or whitespace")
        return v


class Unlock(BaseModel):
    passphrase: str = Field(min_length=1)


class SyncRequest(BaseModel):
    """Optional overrides for push/pull/sync; defaults come from the vault."""
    token: str | None = None
    gist_id: str | None = None


class SyncStatus(BaseModel):
    has_encrypted_token: bool
    unlocked: bool
    gist_id: str | None = None
