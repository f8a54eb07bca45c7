"""Per-date statistics and grouping over appointment snapshots.

All helpers are pure: they never mutate the records they are given and the
caller decides the scope (active, archived, or both).
"""

from __future__ import annotations

import datetime as dt
from typing import Dict, Iterable, List

from backend.models.appointment import SEX_FEMALE, SEX_MALE, Appointment, RecordModel, normalize_sex


class SexCounts(RecordModel):
    """Number of cats per normalized sex on one date."""

    male: int = 0
    female: int = 0
    unknown: int = 0

    @property
    def total(self) -> int:
        return self.male + self.female + self.unknown


def sex_counts(appointments: Iterable[Appointment]) -> Dict[dt.date, SexCounts]:
    """Count cats by sex for each date; blank sexes count as unknown."""

    counts: Dict[dt.date, SexCounts] = {}
    for appointment in appointments:
        for cat in appointment.cats:
            bucket = counts.setdefault(appointment.date, SexCounts())
            sex = normalize_sex(cat.sex)
            if sex == SEX_MALE:
                bucket.male += 1
            elif sex == SEX_FEMALE:
                bucket.female += 1
            else:
                bucket.unknown += 1
    return counts


def total_cats_by_date(appointments: Iterable[Appointment]) -> Dict[dt.date, int]:
    return {day: bucket.total for day, bucket in sex_counts(appointments).items()}


def appointment_counts_by_date(appointments: Iterable[Appointment]) -> Dict[dt.date, int]:
    totals: Dict[dt.date, int] = {}
    for appointment in appointments:
        totals[appointment.date] = totals.get(appointment.date, 0) + 1
    return totals


def sort_by_date(appointments: Iterable[Appointment]) -> List[Appointment]:
    """Stable chronological sort."""

    return sorted(appointments, key=lambda appointment: appointment.date)


def group_by_date(appointments: Iterable[Appointment]) -> Dict[dt.date, List[Appointment]]:
    """Group appointments by date, keeping the input order inside each date."""

    groups: Dict[dt.date, List[Appointment]] = {}
    for appointment in appointments:
        groups.setdefault(appointment.date, []).append(appointment)
    return groups


def filter_by_client_substring(
    appointments: List[Appointment],
    query: str,
) -> List[Appointment]:
    """Case-insensitive substring match on the client name."""

    needle = (query or "").strip().lower()
    if not needle:
        return appointments
    return [
        appointment
        for appointment in appointments
        if needle in (appointment.client_name or "").lower()
    ]
