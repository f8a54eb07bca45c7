"""Doctor and worker registry with date assignments."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, List, Optional

from backend.models.staff import DEFAULT_DOCTOR_COLOR, Doctor, doctor_key
from backend.models.state import SchedulerState
from backend.services.errors import AppointmentValidationError, NotFoundError

LOGGER = logging.getLogger(__name__)


class StaffRegistry:
    """Explicit domain operations for doctors, workers and their dates.

    Removing a doctor or worker cascades into the date-assignment maps so
    no stale reference survives the removal.
    """

    def __init__(
        self,
        state: SchedulerState,
        *,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.state = state
        self._on_change = on_change

    # ------------------------------------------------------------------
    # Doctors
    # ------------------------------------------------------------------
    def add_doctor(self, name: str, color: str = DEFAULT_DOCTOR_COLOR) -> str:
        name = (name or "").strip()
        if not name:
            raise AppointmentValidationError("Doctor name is required.")
        key = doctor_key(name, self.state.doctors)
        self.state.doctors[key] = Doctor(name=name, color=color or DEFAULT_DOCTOR_COLOR)
        LOGGER.info("Added doctor %s as %s", name, key)
        self._notify()
        return key

    def remove_doctor(self, doctor_id: str) -> int:
        """Delete a doctor and every date assigned to them; return that count."""

        if doctor_id not in self.state.doctors:
            raise NotFoundError(f"Doctor {doctor_id} not found")
        del self.state.doctors[doctor_id]
        stale = [day for day, assigned in self.state.doctor_by_date.items() if assigned == doctor_id]
        for day in stale:
            del self.state.doctor_by_date[day]
        LOGGER.info("Removed doctor %s and %s date assignment(s)", doctor_id, len(stale))
        self._notify()
        return len(stale)

    def assign_doctor(self, day: dt.date, doctor_id: str) -> None:
        if doctor_id not in self.state.doctors:
            raise NotFoundError(f"Doctor {doctor_id} not found")
        self.state.doctor_by_date[day] = doctor_id
        self._notify()

    def clear_doctor(self, day: dt.date) -> bool:
        if self.state.doctor_by_date.pop(day, None) is None:
            return False
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------
    def add_worker(self, name: str) -> bool:
        """Add a worker; return False if the exact name is already listed."""

        name = (name or "").strip()
        if not name:
            raise AppointmentValidationError("Worker name is required.")
        if name in self.state.workers:
            return False
        self.state.workers.append(name)
        self._notify()
        return True

    def remove_worker(self, name: str) -> int:
        """Delete a worker and purge them from every staffed date."""

        if name not in self.state.workers:
            raise NotFoundError(f"Worker {name} not found")
        self.state.workers = [worker for worker in self.state.workers if worker != name]

        purged = 0
        for day in list(self.state.staff_by_date):
            names = self.state.staff_by_date[day]
            remaining = [worker for worker in names if worker != name]
            purged += len(names) - len(remaining)
            if remaining:
                self.state.staff_by_date[day] = remaining
            else:
                del self.state.staff_by_date[day]
        LOGGER.info("Removed worker %s from %s date(s)", name, purged)
        self._notify()
        return purged

    def assign_worker(self, day: dt.date, name: str) -> List[str]:
        if name not in self.state.workers:
            raise NotFoundError(f"Worker {name} not found")
        names = self.state.staff_by_date.setdefault(day, [])
        if name not in names:
            names.append(name)
            self._notify()
        return list(names)

    def unassign_worker(self, day: dt.date, name: str) -> List[str]:
        names = self.state.staff_by_date.get(day) or []
        if name not in names:
            raise NotFoundError(f"Worker {name} is not assigned to {day}")
        remaining = [worker for worker in names if worker != name]
        if remaining:
            self.state.staff_by_date[day] = remaining
        else:
            del self.state.staff_by_date[day]
        self._notify()
        return remaining

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
