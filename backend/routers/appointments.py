"""Appointment entry, search, and archive endpoints."""

from __future__ import annotations

import datetime as dt
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from backend.dependencies import get_workspace
from backend.models.appointment import Appointment, AppointmentDraft, RecordModel
from backend.services.aggregation import (
    SexCounts,
    filter_by_client_substring,
    group_by_date,
    sex_counts,
    sort_by_date,
)
from backend.services.workspace import Workspace

LOGGER = logging.getLogger(__name__)

router = APIRouter()


class DateGroup(RecordModel):
    """Appointments sharing one date, with that date's cat tally."""

    date: dt.date
    counts: SexCounts
    total_cats: int
    appointments: List[Appointment]


class ArchiveRequest(RecordModel):
    cutoff: Optional[dt.date] = None


class ArchiveResponse(RecordModel):
    archived: int
    cutoff: dt.date


class DeleteResponse(RecordModel):
    deleted: bool


@router.get("", response_model=List[Appointment])
def list_appointments(
    q: str = Query(default=""),
    workspace: Workspace = Depends(get_workspace),
) -> List[Appointment]:
    """Active appointments sorted by date, optionally filtered by client name."""

    matches = filter_by_client_substring(workspace.appointments.active, q)
    return sort_by_date(matches)


@router.get("/groups", response_model=List[DateGroup])
def list_date_groups(
    q: str = Query(default=""),
    workspace: Workspace = Depends(get_workspace),
) -> List[DateGroup]:
    """Active appointments grouped by date for the list view."""

    state = workspace.state
    counts = sex_counts(state.appointments + state.archived_appointments)
    matches = sort_by_date(filter_by_client_substring(state.appointments, q))

    groups: List[DateGroup] = []
    for day, appointments in group_by_date(matches).items():
        bucket = counts.get(day, SexCounts())
        groups.append(
            DateGroup(
                date=day,
                counts=bucket,
                total_cats=bucket.total,
                appointments=appointments,
            )
        )
    return groups


@router.get("/by-date/{day}", response_model=List[Appointment])
def appointments_for_date(
    day: dt.date,
    workspace: Workspace = Depends(get_workspace),
) -> List[Appointment]:
    """Active appointments on one date, as shown on the printable day sheet."""

    return workspace.appointments.for_date(day)


@router.post("/archive", response_model=ArchiveResponse)
def archive_past(
    payload: Optional[ArchiveRequest] = None,
    workspace: Workspace = Depends(get_workspace),
) -> ArchiveResponse:
    """Archive every active appointment dated before the cutoff (default today)."""

    cutoff = (payload.cutoff if payload else None) or dt.date.today()
    moved = workspace.appointments.archive(cutoff)
    return ArchiveResponse(archived=moved, cutoff=cutoff)


@router.get("/{appointment_id}", response_model=Appointment)
def get_appointment(
    appointment_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> Appointment:
    return workspace.appointments.get(appointment_id)


@router.post("", response_model=Appointment, status_code=status.HTTP_201_CREATED)
def create_appointment(
    draft: AppointmentDraft,
    workspace: Workspace = Depends(get_workspace),
) -> Appointment:
    return workspace.appointments.create(draft)


@router.put("/{appointment_id}", response_model=Appointment)
def update_appointment(
    appointment_id: str,
    draft: AppointmentDraft,
    workspace: Workspace = Depends(get_workspace),
) -> Appointment:
    return workspace.appointments.update(appointment_id, draft)


@router.delete("/{appointment_id}", response_model=DeleteResponse)
def delete_appointment(
    appointment_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> DeleteResponse:
    deleted = workspace.appointments.delete(appointment_id)
    if not deleted:
        LOGGER.debug("Delete requested for missing appointment %s", appointment_id)
    return DeleteResponse(deleted=deleted)
