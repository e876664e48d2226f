# hc_core/tests/test_common_helpers.py
from datetime import date, time
from decimal import Decimal

import pytest

from hc_core.common.display import calculate_age, calculate_bmi, format_currency, format_duration, money
from hc_core.common.transitions import InvalidTransition, StatusMachine
from hc_core.common.validators import (
    medication_errors,
    nic_error,
    not_future_error,
    not_past_error,
    parse_time,
    phone_error,
    required_error,
    time_format_error,
    time_range_error,
)


@pytest.mark.parametrize(
    "today, expected",
    [
        (date(2024, 5, 16), 33),
        (date(2024, 5, 17), 34),
        (date(2024, 12, 31), 34),
    ],
)
def test_calculate_age_counts_whole_years(today, expected):
    assert calculate_age(date(1990, 5, 17), today) == expected


def test_calculate_age_without_birth_date():
    assert calculate_age(None) is None


def test_display_formats():
    assert money("10.005") == Decimal("10.01")
    assert format_currency(1234.5, "LKR") == "LKR 1,234.50"
    assert format_duration(45) == "45 min"
    assert format_duration(120) == "2h 0m"
    assert calculate_bmi(None, 70) is None


def test_status_machine():
    machine = StatusMachine({"A": {"B"}, "B": {"C"}})
    assert machine.states == {"A", "B", "C"}
    assert machine.can("A", "A")
    assert machine.can("A", "B")
    assert not machine.can("A", "C")
    assert machine.is_terminal("C")
    with pytest.raises(InvalidTransition):
        machine.check("C", "A")


def test_required_and_phone():
    assert required_error("  ", "Title") == "Title is required"
    assert required_error([], "Medications") == "Medications is required"
    assert required_error("x", "Title") is None
    assert phone_error("+94 (77) 123-4567") is None
    assert phone_error("call me") == "Please enter a valid phone number"
    assert phone_error("") is None


def test_nic():
    assert nic_error("901234567V") is None
    assert nic_error("199012345678") is None
    assert nic_error("12345") == "Please enter a valid NIC number"


def test_times():
    assert parse_time("9:05") == time(9, 5)
    assert parse_time("09:05:00") == time(9, 5)
    assert parse_time("24:00") is None
    assert time_format_error("7pm") == "Time must be in HH:MM format"
    assert time_range_error("18:00", "09:00") == "Opening time must be before closing time"
    assert time_range_error("09:00", "18:00") is None


def test_dates_relative_to_today():
    today = date(2024, 6, 1)
    assert not_future_error("2024-06-02", today=today, label="Date of birth") == "Date of birth cannot be in the future"
    assert not_future_error("2024-06-01", today=today) is None
    assert not_past_error(date(2024, 5, 31), today=today, label="Appointment date") == (
        "Appointment date cannot be in the past"
    )
    assert not_past_error(today, today=today) is None


def test_medication_errors():
    meds = [
        {"name": "Amoxicillin", "dosage": "500mg", "frequency": "tds", "duration": "7 days"},
        {"name": "Cetirizine", "dosage": ""},
    ]
    assert medication_errors(meds) == ["Medication 2: dosage, frequency, duration required"]
    assert medication_errors([]) == []
