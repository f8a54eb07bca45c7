"""Tests for per-date aggregation helpers."""

import datetime as dt
from collections import Counter

from backend.models.appointment import Appointment, Cat
from backend.services.aggregation import (
    appointment_counts_by_date,
    filter_by_client_substring,
    group_by_date,
    sex_counts,
    sort_by_date,
    total_cats_by_date,
)


def make(appointment_id, day, name="Client", sexes=()):
    return Appointment(
        id=appointment_id,
        client_name=name,
        date=day,
        cats=[Cat(name=f"cat{index}", sex=sex) for index, sex in enumerate(sexes)],
    )


MARCH_5 = dt.date(2024, 3, 5)
MARCH_6 = dt.date(2024, 3, 6)


def test_sex_counts_scenario():
    appointment = Appointment.model_validate(
        {
            "id": "1",
            "clientName": "Jane Doe",
            "date": "2024-03-05",
            "cats": [{"sex": "f"}, {"sex": "M"}, {"sex": ""}],
        }
    )

    counts = sex_counts([appointment])

    assert counts[MARCH_5].model_dump() == {"male": 1, "female": 1, "unknown": 1}


def test_sex_counts_total_matches_cat_count():
    appointments = [
        make("1", MARCH_5, sexes=["m", "f", "?"]),
        make("2", MARCH_5, sexes=["female"]),
        make("3", MARCH_6, sexes=[]),
        make("4", MARCH_6, sexes=["", "M"]),
    ]

    counts = sex_counts(appointments)

    assert sum(bucket.total for bucket in counts.values()) == sum(
        len(appointment.cats) for appointment in appointments
    )
    assert total_cats_by_date(appointments) == {MARCH_5: 4, MARCH_6: 2}


def test_appointments_without_cats_contribute_nothing():
    counts = sex_counts([make("1", MARCH_5)])
    assert counts.get(MARCH_5) is None


def test_appointment_counts_by_date():
    appointments = [make("1", MARCH_5), make("2", MARCH_5), make("3", MARCH_6)]
    assert appointment_counts_by_date(appointments) == {MARCH_5: 2, MARCH_6: 1}


def test_group_by_date_preserves_every_record_and_order():
    appointments = sort_by_date(
        [
            make("b", MARCH_6),
            make("a", MARCH_5),
            make("c", MARCH_6),
            make("d", MARCH_5),
        ]
    )

    groups = group_by_date(appointments)

    assert list(groups) == [MARCH_5, MARCH_6]
    assert [appointment.id for appointment in groups[MARCH_5]] == ["a", "d"]
    assert [appointment.id for appointment in groups[MARCH_6]] == ["b", "c"]
    flattened = [appointment.id for group in groups.values() for appointment in group]
    assert Counter(flattened) == Counter(appointment.id for appointment in appointments)


def test_sort_by_date_is_chronological_across_years():
    appointments = [make("1", dt.date(2025, 1, 2)), make("2", dt.date(2024, 12, 31))]
    assert [appointment.id for appointment in sort_by_date(appointments)] == ["2", "1"]


def test_filter_by_client_substring():
    appointments = [make("1", MARCH_5, "Jane Doe"), make("2", MARCH_5, "John Smith")]

    assert filter_by_client_substring(appointments, "") is appointments
    assert [a.id for a in filter_by_client_substring(appointments, "DOE")] == ["1"]
    assert [a.id for a in filter_by_client_substring(appointments, "  j ")] == ["1", "2"]
    assert filter_by_client_substring(appointments, "zzz") == []
