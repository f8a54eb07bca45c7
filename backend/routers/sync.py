"""Cloud backup and restore of the scheduler snapshot."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from backend.dependencies import get_backup_service, get_workspace
from backend.models.appointment import RecordModel
from backend.services.backup import BackupService, BackupStatus, RestoreResult
from backend.services.workspace import Workspace

LOGGER = logging.getLogger(__name__)

router = APIRouter()


class BackupRequest(RecordModel):
    force: bool = False


class BackupResponse(RecordModel):
    ok: bool
    when: str


@router.post("/backup", response_model=BackupResponse)
def backup_now(
    payload: Optional[BackupRequest] = None,
    workspace: Workspace = Depends(get_workspace),
    backup: BackupService = Depends(get_backup_service),
) -> BackupResponse:
    """Push the current snapshot to the cloud right away."""

    force = bool(payload and payload.force)
    when = backup.backup_now(workspace.state, force=force)
    return BackupResponse(ok=True, when=when)


@router.post("/restore", response_model=RestoreResult)
def restore_from_cloud(
    workspace: Workspace = Depends(get_workspace),
    backup: BackupService = Depends(get_backup_service),
) -> RestoreResult:
    """Overwrite local data with the cloud snapshot."""

    result = backup.restore(workspace.state)
    workspace.save()
    return result


@router.get("/status", response_model=BackupStatus)
def backup_status(backup: BackupService = Depends(get_backup_service)) -> BackupStatus:
    return backup.status()
