"""Appointment store with active and archived partitions."""

from __future__ import annotations

import datetime as dt
import logging
import uuid
from typing import Callable, List, Optional, Tuple

from backend.models.appointment import Appointment, AppointmentDraft
from backend.models.state import SchedulerState
from backend.services.aggregation import sort_by_date
from backend.services.errors import AppointmentValidationError, NotFoundError

LOGGER = logging.getLogger(__name__)

ChangeCallback = Callable[[], None]


def new_appointment_id() -> str:
    return uuid.uuid4().hex


class AppointmentStore:
    """Owns creation, editing, deletion and archiving of appointments.

    The store mutates the lists held by ``state`` in place and calls
    ``on_change`` after every successful mutation. Failed operations leave
    the state untouched and do not notify.
    """

    def __init__(
        self,
        state: SchedulerState,
        *,
        on_change: Optional[ChangeCallback] = None,
        id_factory: Callable[[], str] = new_appointment_id,
    ) -> None:
        self.state = state
        self._on_change = on_change
        self._id_factory = id_factory

    @property
    def active(self) -> List[Appointment]:
        return self.state.appointments

    @property
    def archived(self) -> List[Appointment]:
        return self.state.archived_appointments

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def get(self, appointment_id: str) -> Appointment:
        located = self._locate(appointment_id)
        if located is None:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        partition, index = located
        return partition[index]

    def for_date(self, day: dt.date) -> List[Appointment]:
        """Active appointments on ``day`` in stored order."""

        return [appointment for appointment in self.active if appointment.date == day]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create(self, draft: AppointmentDraft) -> Appointment:
        appointment = self._build(self._id_factory(), draft)
        self.active.append(appointment)
        LOGGER.info("Created appointment id=%s date=%s", appointment.id, appointment.date)
        self._notify()
        return appointment

    def update(self, appointment_id: str, draft: AppointmentDraft) -> Appointment:
        located = self._locate(appointment_id)
        if located is None:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        appointment = self._build(appointment_id, draft)
        partition, index = located
        partition[index] = appointment
        LOGGER.info("Updated appointment id=%s", appointment_id)
        self._notify()
        return appointment

    def delete(self, appointment_id: str) -> bool:
        """Remove the record from whichever partition holds it."""

        located = self._locate(appointment_id)
        if located is None:
            return False
        partition, index = located
        del partition[index]
        LOGGER.info("Deleted appointment id=%s", appointment_id)
        self._notify()
        return True

    def archive(self, cutoff: Optional[dt.date] = None) -> int:
        """Move every active appointment dated strictly before ``cutoff``."""

        cutoff = cutoff or dt.date.today()
        keep: List[Appointment] = []
        moved: List[Appointment] = []
        for appointment in self.active:
            (moved if appointment.date < cutoff else keep).append(appointment)

        if not moved:
            LOGGER.info("No appointments before %s to archive", cutoff)
            return 0

        self.state.appointments = keep
        self.state.archived_appointments = sort_by_date(self.archived + moved)
        LOGGER.info("Archived %s appointment(s) before %s", len(moved), cutoff)
        self._notify()
        return len(moved)

    def restore_all(self) -> int:
        restored = len(self.archived)
        if not restored:
            return 0
        self.state.appointments = sort_by_date(self.active + self.archived)
        self.state.archived_appointments = []
        LOGGER.info("Restored %s archived appointment(s)", restored)
        self._notify()
        return restored

    def restore_one(self, appointment_id: str) -> Appointment:
        index = self._index(self.archived, appointment_id)
        if index is None:
            raise NotFoundError(f"Archived appointment {appointment_id} not found")
        appointment = self.archived.pop(index)
        self.state.appointments = sort_by_date(self.active + [appointment])
        self._notify()
        return appointment

    def delete_permanently(self, appointment_id: str) -> None:
        index = self._index(self.archived, appointment_id)
        if index is None:
            raise NotFoundError(f"Archived appointment {appointment_id} not found")
        del self.archived[index]
        LOGGER.info("Permanently deleted archived appointment id=%s", appointment_id)
        self._notify()

    def replace_active(
        self,
        appointments: List[Appointment],
        archived: Optional[List[Appointment]] = None,
    ) -> None:
        """Swap in a reconciled active list (used by imports).

        ``archived`` replaces the archive too when an import displaced
        archived copies of imported ids.
        """

        self.state.appointments = list(appointments)
        if archived is not None:
            self.state.archived_appointments = list(archived)
        self._notify()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _build(appointment_id: str, draft: AppointmentDraft) -> Appointment:
        if not draft.client_name.strip() or draft.date is None:
            raise AppointmentValidationError("Client Name and Date are required.")

        return Appointment(
            id=appointment_id,
            client_name=draft.client_name,
            date=draft.date,
            address=draft.address,
            phone=draft.phone,
            email=draft.email,
            cats=[cat for cat in draft.cats if not cat.is_blank()],
            services_selected=list(draft.services_selected),
            services_notes=draft.services_notes,
        )

    @staticmethod
    def _index(partition: List[Appointment], appointment_id: str) -> Optional[int]:
        for index, appointment in enumerate(partition):
            if appointment.id == appointment_id:
                return index
        return None

    def _locate(self, appointment_id: str) -> Optional[Tuple[List[Appointment], int]]:
        for partition in (self.active, self.archived):
            index = self._index(partition, appointment_id)
            if index is not None:
                return partition, index
        return None

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
