"""Sync Routes — encrypted token management and Gist push/pull.

Invariants:
    - The plaintext token lives only in the process's SessionCredential
    - POST /unlock with a wrong passphrase -> 400 (CryptoError), credential unchanged
    - Remote calls without a token in the body use the unlocked credential, or 401
    - POST /pull only previews; POST /sync replaces local data (backup first)
"""

from fastapi import APIRouter, Depends, Response, status

from decision_log.api.dependencies import (
    get_remote_sync, get_session_credential, get_vault,
)
from decision_log.core.errors import ResourceNotFoundError
from decision_log.schemas.sync import SyncRequest, SyncStatus, TokenSave, Unlock
from decision_log.services.credential_vault import CredentialVault, SessionCredential
from decision_log.services.remote_sync import RemoteSync

router = APIRouter(prefix="/api/v1/sync", tags=["sync"])


@router.get("/status", response_model=SyncStatus)
async def sync_status(
    vault: CredentialVault = Depends(get_vault),
    credential: SessionCredential = Depends(get_session_credential),
):
    return SyncStatus(
        has_encrypted_token=await vault.has_encrypted_token(),
        unlocked=credential.get() is not None,
        gist_id=await vault.get_gist_id(),
    )


@router.post("/token", status_code=status.HTTP_204_NO_CONTENT)
async def save_token(
    body: TokenSave,
    vault: CredentialVault = Depends(get_vault),
    credential: SessionCredential = Depends(get_session_credential),
):
    await vault.save_token(body.token, body.passphrase)
    credential.set(body.token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/token", status_code=status.HTTP_204_NO_CONTENT)
async def clear_token(
    vault: CredentialVault = Depends(get_vault),
    credential: SessionCredential = Depends(get_session_credential),
):
    await vault.clear()
    credential.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/unlock")
async def unlock(
    body: Unlock,
    vault: CredentialVault = Depends(get_vault),
    credential: SessionCredential = Depends(get_session_credential),
):
    token = await vault.unlock(body.passphrase)
    if token is None:
        raise ResourceNotFoundError("Token", "stored")
    credential.set(token)
    return {"unlocked": True}


@router.post("/verify")
async def verify(
    body: SyncRequest | None = None,
    sync: RemoteSync = Depends(get_remote_sync),
):
    token = body.token if body else None
    return {"valid": await sync.verify_token(token)}


@router.post("/push")
async def push(
    body: SyncRequest | None = None,
    sync: RemoteSync = Depends(get_remote_sync),
):
    gist_id = await sync.push(body.token if body else None)
    return {"gistId": gist_id}


@router.post("/pull")
async def pull(
    body: SyncRequest | None = None,
    sync: RemoteSync = Depends(get_remote_sync),
):
    body = body or SyncRequest()
    pulled = await sync.pull(body.token, body.gist_id)
    return {"count": len(pulled.decisions), "updatedAt": pulled.updated_at}


@router.post("/sync")
async def sync_from_gist(
    body: SyncRequest | None = None,
    sync: RemoteSync = Depends(get_remote_sync),
):
    body = body or SyncRequest()
    count = await sync.sync_from_gist(body.token, body.gist_id)
    return {"imported": count}
