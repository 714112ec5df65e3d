"""Data Routes — export, import and backup management.

Invariants:
    - GET /export returns the current envelope as a JSON attachment
    - POST /import takes the raw file text as the request body; ?mode=replace|merge
    - Bad JSON / bad shape / all-records-invalid -> 400 with the structured error envelope
    - Restoring an unknown backup -> 404 and nothing changes

Design Decisions:
    - Raw body over multipart upload: the local UI already holds the file text
"""

from fastapi import APIRouter, Depends, Request, Response, status

from decision_log.api.dependencies import get_backup_manager, get_import_export
from decision_log.core.domain_types import ImportMode
from decision_log.core.errors import ResourceNotFoundError
from decision_log.core.review_schedule import today_iso
from decision_log.services.backup_manager import BackupManager
from decision_log.services.import_export import ImportExportService

router = APIRouter(prefix="/api/v1/data", tags=["data"])

MANUAL_BACKUP = "Manual backup"


@router.get("/export")
async def export_data(service: ImportExportService = Depends(get_import_export)):
    content = await service.export_json()
    filename = f"decision-log-{today_iso()}.json"
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import")
async def import_data(
    request: Request,
    mode: ImportMode = ImportMode.REPLACE,
    service: ImportExportService = Depends(get_import_export),
):
    report = await service.import_json(await request.body(), mode)
    return report.to_dict()


@router.get("/backups")
async def list_backups(backups: BackupManager = Depends(get_backup_manager)):
    return [b.summary() for b in await backups.list_backups()]


@router.post("/backups", status_code=status.HTTP_201_CREATED)
async def create_backup(backups: BackupManager = Depends(get_backup_manager)):
    backup = await backups.create_backup(MANUAL_BACKUP)
    return backup.summary()


@router.delete("/backups", status_code=status.HTTP_204_NO_CONTENT)
async def clear_backups(backups: BackupManager = Depends(get_backup_manager)):
    await backups.clear_backups()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/backups/{backup_id}/restore")
async def restore_backup(
    backup_id: str, backups: BackupManager = Depends(get_backup_manager),
):
    restored = await backups.restore_backup(backup_id)
    return {"restored": restored}


@router.delete("/backups/{backup_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_backup(
    backup_id: str, backups: BackupManager = Depends(get_backup_manager),
):
    if not await backups.delete_backup(backup_id):
        raise ResourceNotFoundError("Backup", backup_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
