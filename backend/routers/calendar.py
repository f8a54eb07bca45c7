"""Monthly calendar endpoints."""

import datetime as dt

from fastapi import APIRouter, Depends, Path

from backend.dependencies import get_workspace
from backend.services.calendar_view import CalendarMonth, project_month
from backend.services.workspace import Workspace

router = APIRouter()


def _project(workspace: Workspace, year: int, month: int) -> CalendarMonth:
    state = workspace.state
    # Counts cover archived visits too, so past days keep their tallies.
    return project_month(
        year,
        month,
        state.appointments + state.archived_appointments,
        state.doctors,
        state.doctor_by_date,
        state.staff_by_date,
    )


@router.get("", response_model=CalendarMonth)
def current_month(workspace: Workspace = Depends(get_workspace)) -> CalendarMonth:
    today = dt.date.today()
    return _project(workspace, today.year, today.month)


@router.get("/{year}/{month}", response_model=CalendarMonth)
def month_view(
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
    workspace: Workspace = Depends(get_workspace),
) -> CalendarMonth:
    """Project one month; ``prev``/``next`` in the body drive navigation."""

    return _project(workspace, year, month)
