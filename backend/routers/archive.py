"""Archived appointment endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status

from backend.dependencies import get_workspace
from backend.models.appointment import Appointment, RecordModel
from backend.services.workspace import Workspace

router = APIRouter()


class RestoreAllResponse(RecordModel):
    restored: int


@router.get("", response_model=List[Appointment])
def list_archived(workspace: Workspace = Depends(get_workspace)) -> List[Appointment]:
    return workspace.appointments.archived


@router.post("/restore", response_model=RestoreAllResponse)
def restore_all(workspace: Workspace = Depends(get_workspace)) -> RestoreAllResponse:
    """Move every archived appointment back to the active list."""

    return RestoreAllResponse(restored=workspace.appointments.restore_all())


@router.post("/{appointment_id}/restore", response_model=Appointment)
def restore_one(
    appointment_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> Appointment:
    return workspace.appointments.restore_one(appointment_id)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_permanently(
    appointment_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> None:
    workspace.appointments.delete_permanently(appointment_id)
