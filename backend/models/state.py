"""Whole-application snapshot persisted locally and backed up remotely."""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List

from pydantic import Field

from backend.models.appointment import Appointment, RecordModel
from backend.models.staff import Doctor

DEFAULT_DOCTORS: Dict[str, Dict[str, str]] = {
    "sm": {"name": "Dr. Smith", "color": "#10b981"},
    "jn": {"name": "Dr. Jones", "color": "#f59e0b"},
    "ly": {"name": "Dr. Lee", "color": "#3b82f6"},
}
DEFAULT_WORKERS: List[str] = ["Alex", "Bailey", "Casey"]


class SchedulerState(RecordModel):
    """Every piece of scheduler data as one versioned record."""

    version: int = 0
    appointments: List[Appointment] = Field(default_factory=list)
    archived_appointments: List[Appointment] = Field(default_factory=list)
    doctors: Dict[str, Doctor] = Field(default_factory=dict)
    doctor_by_date: Dict[dt.date, str] = Field(default_factory=dict)
    workers: List[str] = Field(default_factory=list)
    staff_by_date: Dict[dt.date, List[str]] = Field(default_factory=dict)

    @classmethod
    def seeded(cls) -> "SchedulerState":
        """Return a fresh state with the default doctors and workers."""

        return cls(
            doctors={key: Doctor(**value) for key, value in DEFAULT_DOCTORS.items()},
            workers=list(DEFAULT_WORKERS),
        )

    def is_empty(self) -> bool:
        """Return True when there is nothing worth backing up."""

        return not (
            self.appointments
            or self.archived_appointments
            or self.doctors
            or self.doctor_by_date
            or self.workers
            or self.staff_by_date
        )

    def to_document(self) -> Dict[str, Any]:
        """Serialize the data fields as the camelCase backup document."""

        return self.model_dump(mode="json", by_alias=True, exclude={"version"})
