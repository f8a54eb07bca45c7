"""Manual export and import endpoints."""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.concurrency import run_in_threadpool

from backend.dependencies import get_workspace
from backend.models.appointment import RecordModel
from backend.services.errors import ImportFormatError
from backend.services.transfer import (
    ImportResult,
    appointments_to_csv,
    export_filename,
    export_json,
    merge_import,
    parse_import,
)
from backend.services.workspace import Workspace

LOGGER = logging.getLogger(__name__)

router = APIRouter()


class ImportSummary(RecordModel):
    added: int
    replaced: int
    total: int


def _attachment(content: str, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export.json")
def export_active_json(workspace: Workspace = Depends(get_workspace)) -> Response:
    """Download the active appointments as indented JSON."""

    body = export_json(workspace.appointments.active)
    return _attachment(body, "application/json", export_filename("active", "json"))


@router.get("/export.csv")
def export_csv(
    scope: Literal["all", "active"] = Query(default="all"),
    workspace: Workspace = Depends(get_workspace),
) -> Response:
    """Download appointments flattened to one CSV row per cat."""

    store = workspace.appointments
    if scope == "all":
        archived_ids = {appointment.id for appointment in store.archived}
        body = appointments_to_csv(store.active + store.archived, archived_ids)
    else:
        body = appointments_to_csv(store.active)
    return _attachment(body, "text/csv; charset=utf-8", export_filename(scope, "csv"))


def _apply_import(workspace: Workspace, text: str) -> ImportResult:
    store = workspace.appointments
    result = merge_import(store.active, parse_import(text), store.archived)
    store.replace_active(result.appointments, result.archived)
    return result


@router.post("/import", response_model=ImportSummary)
async def import_json(
    request: Request,
    workspace: Workspace = Depends(get_workspace),
) -> ImportSummary:
    """Merge an exported JSON file into the stored appointments by id."""

    raw = await request.body()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ImportFormatError("Import file must be UTF-8 encoded") from exc

    # Database writes run off the event loop.
    result = await run_in_threadpool(_apply_import, workspace, text)

    LOGGER.info(
        "Import complete: added=%s replaced=%s total=%s",
        result.added,
        result.replaced,
        result.total,
    )
    return ImportSummary(added=result.added, replaced=result.replaced, total=result.total)
