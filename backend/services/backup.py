"""Cloud backup and restore of the whole scheduler state."""

from __future__ import annotations

import datetime as dt
import json
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from backend.models.appointment import RecordModel
from backend.models.state import SchedulerState
from backend.services.cache import last_backup_time, recall_blob_id, record_backup_time, remember_blob_id
from backend.services.errors import EmptySnapshotError, ImportFormatError
from backend.services.scheduler import BackupScheduler
from backup_service.gist_adapter import BackupNotFoundError, GistBackupAdapter

LOGGER = logging.getLogger(__name__)

# Keys whose absence in a backup document leaves the local value untouched.
OPTIONAL_SECTIONS = {
    "doctors": "doctors",
    "doctorByDate": "doctor_by_date",
    "workers": "workers",
    "staffByDate": "staff_by_date",
}


class BackupStatus(RecordModel):
    site: str
    blob_id: Optional[str] = None
    last_backup_at: Optional[str] = None
    pending: bool = False
    last_error: Optional[str] = None


class RestoreResult(RecordModel):
    when: Optional[str] = None
    appointments: int
    archived: int


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""

    moment = dt.datetime.now(dt.timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BackupService:
    """Push snapshots to the remote blob and restore them back."""

    def __init__(
        self,
        adapter: GistBackupAdapter,
        *,
        site: str,
        scheduler: Optional[BackupScheduler] = None,
    ) -> None:
        self.adapter = adapter
        self.site = site
        self.scheduler = scheduler
        self.last_error: Optional[str] = None
        if scheduler is not None:
            scheduler.on_error = self.record_error
        if not self.adapter.blob_id:
            self.adapter.blob_id = recall_blob_id(site)

    def backup_now(self, state: SchedulerState, *, force: bool = False) -> str:
        """Push ``state`` immediately and return the backup timestamp."""

        if state.is_empty() and not force:
            raise EmptySnapshotError(
                "Data looks empty; refusing to overwrite the cloud backup with an empty snapshot."
            )
        if self.scheduler is not None:
            self.scheduler.cancel()
        return self.push_document(state.to_document())

    def push_document(self, document: Dict[str, Any]) -> str:
        when = utc_timestamp()
        try:
            created = self.adapter.push(site=self.site, data=document, when=when)
        except Exception as exc:
            self.record_error(exc)
            raise
        if created:
            remember_blob_id(self.site, created)
        record_backup_time(self.site, when)
        self.last_error = None
        LOGGER.info("Cloud backup saved at %s", when)
        return when

    def schedule_push(self, state: SchedulerState) -> None:
        """Debounce a push of the current snapshot."""

        if self.scheduler is None:
            return
        document = state.to_document()
        self.scheduler.schedule(lambda: self.push_document(document))

    def fetch(self) -> Dict[str, Any]:
        """Pull and decode the remote ``{site, when, data}`` document."""

        raw = self.adapter.pull(site=self.site)
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ImportFormatError(f"Backup document is not valid JSON: {exc.msg}") from exc
        if not isinstance(document, dict) or document.get("data") is None:
            raise BackupNotFoundError("Backup file empty.")
        return document

    def restore(self, state: SchedulerState) -> RestoreResult:
        """Overwrite ``state`` with the remote snapshot.

        Appointment lists are always replaced; doctors, workers and the
        date maps only when the document carries them.
        """

        document = self.fetch()
        data = document["data"]
        if not isinstance(data, dict):
            raise ImportFormatError("Backup data must be an object")
        try:
            incoming = SchedulerState.model_validate(data)
        except ValidationError as exc:
            raise ImportFormatError(f"Backup data is invalid: {exc.errors()[0]['msg']}") from exc

        state.appointments = incoming.appointments
        state.archived_appointments = incoming.archived_appointments
        for key, field in OPTIONAL_SECTIONS.items():
            if data.get(key) is not None:
                setattr(state, field, getattr(incoming, field))

        LOGGER.info("Restored snapshot taken at %s", document.get("when"))
        return RestoreResult(
            when=document.get("when"),
            appointments=len(state.appointments),
            archived=len(state.archived_appointments),
        )

    def record_error(self, exc: Exception) -> None:
        self.last_error = str(exc)

    def status(self) -> BackupStatus:
        return BackupStatus(
            site=self.site,
            blob_id=self.adapter.blob_id,
            last_backup_at=last_backup_time(self.site),
            pending=bool(self.scheduler and self.scheduler.pending),
            last_error=self.last_error,
        )
