"""Snapshot ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from backend.models.base import Base

SNAPSHOT_ROW_ID = 1


class SnapshotRecord(Base):
    """Single-row table holding the serialized scheduler state."""

    __tablename__ = "snapshots"

    id: Mapped[int] = mapped_column(primary_key=True, default=SNAPSHOT_ROW_ID)
    version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    payload: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )
