"""Per-request unit of work over the persisted scheduler state."""

from __future__ import annotations

import logging
from typing import Optional

from backend.services.backup import BackupService
from backend.services.staff import StaffRegistry
from backend.services.storage import SnapshotRepository
from backend.services.store import AppointmentStore

LOGGER = logging.getLogger(__name__)


class Workspace:
    """Load the snapshot, expose the domain stores, persist after mutations.

    Local persistence always happens before the debounced remote push is
    scheduled, so a failed or pending push never affects local state.
    """

    def __init__(
        self,
        repository: SnapshotRepository,
        *,
        backup: Optional[BackupService] = None,
        auto_push: bool = False,
    ) -> None:
        self.repository = repository
        self.backup = backup
        self.auto_push = auto_push
        self.state = repository.load()
        self.appointments = AppointmentStore(self.state, on_change=self.commit)
        self.staff = StaffRegistry(self.state, on_change=self.commit)

    def commit(self) -> None:
        self.save()
        if self.auto_push and self.backup is not None:
            self.backup.schedule_push(self.state)

    def save(self) -> int:
        """Persist locally without scheduling a push."""

        return self.repository.save(self.state)
