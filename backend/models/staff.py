"""Doctor registry records."""

from __future__ import annotations

import re
from typing import Iterable

from pydantic import Field

from backend.models.appointment import RecordModel

DEFAULT_DOCTOR_COLOR = "#10b981"


class Doctor(RecordModel):
    """A doctor that can be assigned to calendar dates."""

    name: str = Field(min_length=1)
    color: str = Field(default=DEFAULT_DOCTOR_COLOR)


def slugify(value: str) -> str:
    """Lower-case a name and collapse non-alphanumerics into dashes."""

    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def doctor_key(name: str, taken: Iterable[str]) -> str:
    """Return a slug key for ``name`` that does not collide with ``taken``."""

    existing = set(taken)
    base = slugify(name) or "doctor"
    key = base
    suffix = 2
    while key in existing:
        key = f"{base}-{suffix}"
        suffix += 1
    return key
