"""FastAPI dependency providers shared by the routers."""

from __future__ import annotations

import threading
from functools import lru_cache
from typing import Iterator

from fastapi import Depends

from backend.services.backup import BackupService
from backend.services.db import SessionLocal, init_db
from backend.services.scheduler import BackupScheduler
from backend.services.storage import SnapshotRepository
from backend.services.workspace import Workspace
from backend.utils.config import Settings, get_settings
from backup_service.gist_adapter import GistBackupAdapter

# One logical actor mutates the snapshot at a time.
_WORKSPACE_LOCK = threading.Lock()


@lru_cache()
def get_repository() -> SnapshotRepository:
    """Return the process-wide snapshot repository, creating tables once."""

    init_db()
    return SnapshotRepository(SessionLocal)


def build_gist_adapter(settings: Settings) -> GistBackupAdapter:
    return GistBackupAdapter(
        token=settings.github_token,
        blob_id=settings.gist_id,
        base_url=settings.github_api_url,
        user_agent=f"{settings.backup_site}-backup",
        timeout_seconds=settings.http_timeout_seconds,
    )


def get_gist_adapter(settings: Settings = Depends(get_settings)) -> GistBackupAdapter:
    """Fresh adapter per request, configured only from the environment."""

    return build_gist_adapter(settings)


@lru_cache()
def get_backup_service() -> BackupService:
    """Return the session-wide backup service and its debounce scheduler."""

    settings = get_settings()
    return BackupService(
        build_gist_adapter(settings),
        site=settings.backup_site,
        scheduler=BackupScheduler(settings.backup_debounce_seconds),
    )


def get_workspace(
    repository: SnapshotRepository = Depends(get_repository),
    backup: BackupService = Depends(get_backup_service),
    settings: Settings = Depends(get_settings),
) -> Iterator[Workspace]:
    """Yield a workspace while holding the process-wide mutation lock."""

    with _WORKSPACE_LOCK:
        yield Workspace(repository, backup=backup, auto_push=settings.backup_auto_push)
