"""JSON and CSV export, and JSON import reconciliation."""

from __future__ import annotations

import datetime as dt
import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Set

from pydantic import Field, ValidationError

from backend.models.appointment import Appointment, RecordModel
from backend.services.aggregation import sort_by_date
from backend.services.errors import ImportFormatError
from backend.services.store import new_appointment_id

LOGGER = logging.getLogger(__name__)

CSV_HEADERS: List[str] = [
    "Date",
    "Client Name",
    "Address",
    "Phone",
    "Email",
    "Cat Name",
    "Cat Age",
    "Cat Color",
    "Cat Breed",
    "Cat Sex",
    "Selected Services",
    "Services Notes",
    "Appointment ID",
]
ARCHIVED_HEADER = "Archived"
SERVICES_SEPARATOR = "; "

_NEEDS_QUOTES = re.compile(r'[",\n]')


class ImportResult(RecordModel):
    """Outcome of reconciling an import file with both partitions."""

    appointments: List[Appointment]
    archived: List[Appointment] = Field(default_factory=list)
    added: int
    replaced: int

    @property
    def total(self) -> int:
        return len(self.appointments)


def export_json(appointments: Iterable[Appointment]) -> str:
    """Serialize appointments as camelCase JSON with 2-space indentation."""

    records = [appointment.model_dump(mode="json", by_alias=True) for appointment in appointments]
    return json.dumps(records, indent=2, ensure_ascii=False)


def csv_escape(value: Any) -> str:
    text = "" if value is None else str(value)
    if _NEEDS_QUOTES.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def appointments_to_csv(
    appointments: Iterable[Appointment],
    archived_ids: Optional[Set[str]] = None,
) -> str:
    """Flatten appointments to one row per cat.

    When ``archived_ids`` is given an ``Archived`` column is appended and
    filled with Yes/No.
    """

    headers = list(CSV_HEADERS)
    if archived_ids is not None:
        headers.append(ARCHIVED_HEADER)
    rows = [",".join(headers)]

    for appointment in appointments:
        base = [
            appointment.date.isoformat(),
            appointment.client_name,
            appointment.address,
            appointment.phone,
            appointment.email,
        ]
        tail = [
            SERVICES_SEPARATOR.join(appointment.services_selected),
            appointment.services_notes,
            appointment.id,
        ]
        if archived_ids is not None:
            tail.append("Yes" if appointment.id in archived_ids else "No")

        cat_rows = [[cat.name, cat.age, cat.color, cat.breed, cat.sex] for cat in appointment.cats]
        for cat_fields in cat_rows or [[""] * 5]:
            rows.append(",".join(csv_escape(field) for field in base + cat_fields + tail))

    return "\n".join(rows)


def parse_import(text: str) -> List[Appointment]:
    """Parse an import document into appointments without touching any state."""

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ImportFormatError(f"Invalid JSON: {exc.msg}") from exc

    if not isinstance(data, list):
        raise ImportFormatError("Invalid JSON format")

    records: List[Appointment] = []
    for position, entry in enumerate(data):
        if not isinstance(entry, dict):
            continue
        if entry.get("id") in (None, ""):
            entry = {**entry, "id": new_appointment_id()}
        try:
            records.append(Appointment.model_validate(entry))
        except ValidationError as exc:
            raise ImportFormatError(f"Record {position} is invalid: {exc.errors()[0]['msg']}") from exc

    LOGGER.debug("Parsed %s import record(s) from %s entries", len(records), len(data))
    return records


def merge_import(
    current: Iterable[Appointment],
    incoming: Iterable[Appointment],
    archived: Iterable[Appointment] = (),
) -> ImportResult:
    """Replace records whose id already exists and add the rest.

    An imported record whose id sits in ``archived`` replaces the archived
    copy, which is dropped so the id lives in one partition only.
    """

    by_id: Dict[str, Appointment] = {appointment.id: appointment for appointment in current}
    archived_list = list(archived)
    archived_ids = {appointment.id for appointment in archived_list}
    displaced: Set[str] = set()
    added = replaced = 0
    for appointment in incoming:
        if appointment.id in by_id:
            replaced += 1
        elif appointment.id in archived_ids:
            displaced.add(appointment.id)
            replaced += 1
        else:
            added += 1
        by_id[appointment.id] = appointment

    return ImportResult(
        appointments=sort_by_date(by_id.values()),
        archived=[appointment for appointment in archived_list if appointment.id not in displaced],
        added=added,
        replaced=replaced,
    )


def export_timestamp(now: Optional[dt.datetime] = None) -> str:
    moment = now or dt.datetime.now(dt.timezone.utc)
    return re.sub(r"[:T]", "-", moment.isoformat()[:19])


def export_filename(scope: str, extension: str, now: Optional[dt.datetime] = None) -> str:
    return f"appointments-{scope}-{export_timestamp(now)}.{extension}"
