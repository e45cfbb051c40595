from datetime import date, time

import pytest

from src.payroll_system.payroll_system.common.datetime_utils import month_bounds, parse_clock
from src.payroll_system.payroll_system.core.exceptions import InvalidShiftError


def test_month_bounds_handles_leap_years():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2025, 2) == (date(2025, 2, 1), date(2025, 2, 28))
    assert month_bounds(2025, 12) == (date(2025, 12, 1), date(2025, 12, 31))


def test_parse_clock_accepts_strings_and_times():
    assert parse_clock("7:05") == time(7, 5)
    assert parse_clock(" 23:59 ") == time(23, 59)
    assert parse_clock(time(8, 30, 15)) == time(8, 30)


def test_parse_clock_rejects_garbage():
    with pytest.raises(InvalidShiftError):
        parse_clock("12:60")
