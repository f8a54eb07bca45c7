"""Monthly calendar projection."""

from __future__ import annotations

import calendar
import datetime as dt
from typing import List, Mapping, Optional, Sequence, Tuple

from backend.models.appointment import Appointment, RecordModel
from backend.models.staff import Doctor
from backend.services.aggregation import SexCounts, appointment_counts_by_date, sex_counts

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class AssignedDoctor(RecordModel):
    id: str
    name: str
    color: str


class CalendarCell(RecordModel):
    """One day of the month grid, or a blank leading cell."""

    date: Optional[dt.date] = None
    day: Optional[int] = None
    counts: SexCounts = SexCounts()
    total_cats: int = 0
    appointment_count: int = 0
    doctor: Optional[AssignedDoctor] = None
    staff_count: int = 0


class CalendarMonth(RecordModel):
    year: int
    month: int
    label: str
    weekdays: List[str]
    cells: List[CalendarCell]
    prev: Tuple[int, int]
    next: Tuple[int, int]


def start_weekday(year: int, month: int) -> int:
    """Day of week of the 1st, counting from Sunday as 0."""

    return (dt.date(year, month, 1).weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_cells(year: int, month: int) -> List[Optional[dt.date]]:
    """Leading ``None`` placeholders followed by every date of the month."""

    blanks: List[Optional[dt.date]] = [None] * start_weekday(year, month)
    dates = [dt.date(year, month, day) for day in range(1, days_in_month(year, month) + 1)]
    return blanks + dates


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_label(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"


def project_month(
    year: int,
    month: int,
    appointments: Sequence[Appointment],
    doctors: Mapping[str, Doctor],
    doctor_by_date: Mapping[dt.date, str],
    staff_by_date: Mapping[dt.date, List[str]],
) -> CalendarMonth:
    """Build the month grid and annotate every date with its aggregates."""

    counts = sex_counts(appointments)
    visits = appointment_counts_by_date(appointments)

    cells: List[CalendarCell] = []
    for day in month_cells(year, month):
        if day is None:
            cells.append(CalendarCell())
            continue

        bucket = counts.get(day, SexCounts())
        doctor: Optional[AssignedDoctor] = None
        doctor_id = doctor_by_date.get(day)
        record = doctors.get(doctor_id) if doctor_id else None
        if record is not None:
            doctor = AssignedDoctor(id=doctor_id, name=record.name, color=record.color)

        cells.append(
            CalendarCell(
                date=day,
                day=day.day,
                counts=bucket,
                total_cats=bucket.total,
                appointment_count=visits.get(day, 0),
                doctor=doctor,
                staff_count=len(staff_by_date.get(day) or []),
            )
        )

    return CalendarMonth(
        year=year,
        month=month,
        label=month_label(year, month),
        weekdays=list(WEEKDAY_LABELS),
        cells=cells,
        prev=shift_month(year, month, -1),
        next=shift_month(year, month, 1),
    )
