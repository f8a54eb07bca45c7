"""Tests for the monthly calendar projection."""

import datetime as dt

import pytest

from backend.models.appointment import Appointment, Cat
from backend.models.staff import Doctor
from backend.services.calendar_view import (
    days_in_month,
    month_cells,
    month_label,
    project_month,
    shift_month,
    start_weekday,
)


def test_cell_count_for_every_month_1900_to_2100():
    for year in range(1900, 2101):
        for month in range(1, 13):
            cells = month_cells(year, month)
            assert len(cells) == start_weekday(year, month) + days_in_month(year, month)
            assert cells[start_weekday(year, month)] == dt.date(year, month, 1)


@pytest.mark.parametrize(
    "year, expected",
    [(2024, 29), (2023, 28), (2000, 29), (1900, 28), (2100, 28)],
)
def test_february_length(year, expected):
    assert days_in_month(year, 2) == expected


def test_leading_blanks_align_with_sunday_first_week():
    # 1 March 2024 was a Friday.
    cells = month_cells(2024, 3)
    assert start_weekday(2024, 3) == 5
    assert cells[:5] == [None] * 5
    assert cells[5] == dt.date(2024, 3, 1)
    assert cells[-1] == dt.date(2024, 3, 31)

    # 1 September 2024 was a Sunday.
    assert month_cells(2024, 9)[0] == dt.date(2024, 9, 1)


def test_shift_month_wraps_years():
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2024, 12, 1) == (2025, 1)
    assert shift_month(2024, 5, 0) == (2024, 5)
    assert month_label(2024, 3) == "March 2024"


def test_project_month_attaches_aggregates():
    day = dt.date(2024, 3, 5)
    appointments = [
        Appointment(
            id="1",
            client_name="Jane",
            date=day,
            cats=[Cat(sex="f"), Cat(sex="m"), Cat(name="Mystery")],
        ),
        Appointment(id="2", client_name="John", date=day),
    ]

    month = project_month(
        2024,
        3,
        appointments,
        {"sm": Doctor(name="Dr. Smith", color="#10b981")},
        {day: "sm", dt.date(2024, 3, 6): "gone"},
        {day: ["Alex", "Bailey"]},
    )

    cell = next(cell for cell in month.cells if cell.date == day)
    assert cell.counts.model_dump() == {"male": 1, "female": 1, "unknown": 1}
    assert cell.total_cats == 3
    assert cell.appointment_count == 2
    assert cell.doctor is not None and cell.doctor.name == "Dr. Smith"
    assert cell.staff_count == 2

    unassigned = next(cell for cell in month.cells if cell.date == dt.date(2024, 3, 6))
    assert unassigned.doctor is None
    assert unassigned.total_cats == 0

    assert month.cells[0].date is None
    assert month.prev == (2024, 2)
    assert month.next == (2024, 4)
    assert month.weekdays[0] == "Sun"
