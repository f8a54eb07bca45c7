"""Stateless backup/restore endpoints in front of the gist blob store.

Status codes and bodies follow the contract the browser client expects:
500 with a plain-text reason on missing credentials or upstream failures,
404 when the blob has no backup file.
"""

from __future__ import annotations

import json
import logging

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse

from backend.dependencies import get_gist_adapter
from backend.services.backup import utc_timestamp
from backend.utils.config import Settings, get_settings
from backup_service.gist_adapter import (
    BackupError,
    BackupNotFoundError,
    GistBackupAdapter,
    MissingCredentialsError,
)

LOGGER = logging.getLogger(__name__)

router = APIRouter()


@router.post("/backup")
async def backup_function(
    request: Request,
    adapter: GistBackupAdapter = Depends(get_gist_adapter),
    settings: Settings = Depends(get_settings),
) -> Response:
    if not adapter.token:
        return PlainTextResponse("Missing GITHUB_TOKEN", status_code=500)

    try:
        raw = await request.body()
        payload = json.loads(raw or b"{}")
        if not isinstance(payload, dict):
            raise ValueError("payload must be a JSON object")
        site = payload.get("site") or settings.backup_site
        data = payload.get("data") or {}
        when = payload.get("when") or utc_timestamp()

        created = await run_in_threadpool(adapter.push, site=site, data=data, when=when)
    except (BackupError, httpx.HTTPError, ValueError) as exc:
        LOGGER.error("Backup function failed: %s", exc)
        return PlainTextResponse(f"Backup failed: {exc}", status_code=500)

    if created:
        return JSONResponse({"ok": True, "blobId": created})
    return JSONResponse({"ok": True})


@router.get("/restore")
def restore_function(
    adapter: GistBackupAdapter = Depends(get_gist_adapter),
    settings: Settings = Depends(get_settings),
) -> Response:
    try:
        text = adapter.pull(site=settings.backup_site)
    except MissingCredentialsError:
        return PlainTextResponse("Missing GITHUB_TOKEN or GIST_ID", status_code=500)
    except BackupNotFoundError:
        return PlainTextResponse("No backup file", status_code=404)
    except (BackupError, httpx.HTTPError) as exc:
        LOGGER.error("Restore function failed: %s", exc)
        return PlainTextResponse(f"Restore failed: {exc}", status_code=500)

    return Response(content=text, media_type="application/json")
