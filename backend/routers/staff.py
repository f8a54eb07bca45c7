"""Doctor and worker registry endpoints."""

from __future__ import annotations

import datetime as dt
from typing import Dict, List

from fastapi import APIRouter, Depends, status
from pydantic import Field

from backend.dependencies import get_workspace
from backend.models.appointment import RecordModel
from backend.models.staff import DEFAULT_DOCTOR_COLOR, Doctor
from backend.services.workspace import Workspace

doctors_router = APIRouter()
workers_router = APIRouter()


class DoctorCreate(RecordModel):
    name: str = Field(min_length=1)
    color: str = Field(default=DEFAULT_DOCTOR_COLOR)


class DoctorCreated(RecordModel):
    id: str
    doctor: Doctor


class DoctorAssignment(RecordModel):
    doctor_id: str


class DoctorRoster(RecordModel):
    doctors: Dict[str, Doctor]
    doctor_by_date: Dict[dt.date, str]


class RemovalResponse(RecordModel):
    removed: str
    cleared_dates: int


class WorkerCreate(RecordModel):
    name: str = Field(min_length=1)


class WorkerRoster(RecordModel):
    workers: List[str]
    staff_by_date: Dict[dt.date, List[str]]


class StaffForDate(RecordModel):
    date: dt.date
    workers: List[str]


# ----------------------------------------------------------------------
# Doctors
# ----------------------------------------------------------------------
@doctors_router.get("", response_model=DoctorRoster)
def list_doctors(workspace: Workspace = Depends(get_workspace)) -> DoctorRoster:
    state = workspace.state
    return DoctorRoster(doctors=state.doctors, doctor_by_date=state.doctor_by_date)


@doctors_router.post("", response_model=DoctorCreated, status_code=status.HTTP_201_CREATED)
def add_doctor(
    payload: DoctorCreate,
    workspace: Workspace = Depends(get_workspace),
) -> DoctorCreated:
    key = workspace.staff.add_doctor(payload.name, payload.color)
    return DoctorCreated(id=key, doctor=workspace.state.doctors[key])


@doctors_router.delete("/{doctor_id}", response_model=RemovalResponse)
def remove_doctor(
    doctor_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> RemovalResponse:
    cleared = workspace.staff.remove_doctor(doctor_id)
    return RemovalResponse(removed=doctor_id, cleared_dates=cleared)


@doctors_router.put("/assignments/{day}", response_model=DoctorRoster)
def assign_doctor(
    day: dt.date,
    payload: DoctorAssignment,
    workspace: Workspace = Depends(get_workspace),
) -> DoctorRoster:
    workspace.staff.assign_doctor(day, payload.doctor_id)
    return list_doctors(workspace)


@doctors_router.delete("/assignments/{day}", response_model=DoctorRoster)
def clear_doctor(
    day: dt.date,
    workspace: Workspace = Depends(get_workspace),
) -> DoctorRoster:
    workspace.staff.clear_doctor(day)
    return list_doctors(workspace)


# ----------------------------------------------------------------------
# Workers
# ----------------------------------------------------------------------
@workers_router.get("", response_model=WorkerRoster)
def list_workers(workspace: Workspace = Depends(get_workspace)) -> WorkerRoster:
    state = workspace.state
    return WorkerRoster(workers=state.workers, staff_by_date=state.staff_by_date)


@workers_router.post("", response_model=WorkerRoster, status_code=status.HTTP_201_CREATED)
def add_worker(
    payload: WorkerCreate,
    workspace: Workspace = Depends(get_workspace),
) -> WorkerRoster:
    workspace.staff.add_worker(payload.name)
    return list_workers(workspace)


@workers_router.delete("/{name}", response_model=RemovalResponse)
def remove_worker(
    name: str,
    workspace: Workspace = Depends(get_workspace),
) -> RemovalResponse:
    purged = workspace.staff.remove_worker(name)
    return RemovalResponse(removed=name, cleared_dates=purged)


@workers_router.post("/assignments/{day}", response_model=StaffForDate)
def assign_worker(
    day: dt.date,
    payload: WorkerCreate,
    workspace: Workspace = Depends(get_workspace),
) -> StaffForDate:
    names = workspace.staff.assign_worker(day, payload.name)
    return StaffForDate(date=day, workers=names)


@workers_router.delete("/assignments/{day}/{name}", response_model=StaffForDate)
def unassign_worker(
    day: dt.date,
    name: str,
    workspace: Workspace = Depends(get_workspace),
) -> StaffForDate:
    remaining = workspace.staff.unassign_worker(day, name)
    return StaffForDate(date=day, workers=remaining)
