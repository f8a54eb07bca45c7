"""Local persistence of the scheduler snapshot."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.orm import sessionmaker

from backend.models.snapshot import SNAPSHOT_ROW_ID, SnapshotRecord
from backend.models.state import SchedulerState
from backend.services.db import get_session

LOGGER = logging.getLogger(__name__)


class SnapshotRepository:
    """Load and save the whole scheduler state as one versioned row."""

    def __init__(self, session_factory: Optional[sessionmaker] = None) -> None:
        self._session_factory = session_factory

    def load(self) -> SchedulerState:
        """Return the stored state, or a seeded one when nothing is stored."""

        with get_session(self._session_factory) as session:
            record = session.get(SnapshotRecord, SNAPSHOT_ROW_ID)
            if record is None:
                LOGGER.debug("No stored snapshot; starting from defaults")
                return SchedulerState.seeded()
            payload = dict(record.payload)
            version = record.version

        try:
            state = SchedulerState.model_validate(payload)
        except ValidationError:
            LOGGER.error("Stored snapshot v%s failed validation", version)
            raise
        state.version = version
        return state

    def save(self, state: SchedulerState) -> int:
        """Persist ``state`` atomically and return its new version."""

        payload = state.to_document()
        with get_session(self._session_factory) as session:
            record = session.get(SnapshotRecord, SNAPSHOT_ROW_ID)
            if record is None:
                record = SnapshotRecord(id=SNAPSHOT_ROW_ID, version=0, payload=payload)
                session.add(record)
            record.version = state.version + 1
            record.payload = payload
        state.version += 1
        LOGGER.debug("Saved snapshot v%s", state.version)
        return state.version
