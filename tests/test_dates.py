"""Tests for calendar-day helpers in `app/shared/dates.py`."""

from datetime import date, datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from app.shared.dates import describe_date, format_record_date, parse_record_date, shift_date


@given(day=st.dates(min_value=date(1000, 1, 1)), seconds=st.integers(min_value=0, max_value=86399))
def test_same_day_formats_to_same_key(day: date, seconds: int) -> None:
    moment = datetime.combine(day, datetime.min.time()) + timedelta(seconds=seconds)
    assert format_record_date(moment) == format_record_date(day)
    assert parse_record_date(format_record_date(day)) == day


def test_format_pads_month_and_day() -> None:
    assert format_record_date(date(2024, 3, 5)) == "2024-03-05"


def test_string_keys_are_normalized() -> None:
    assert format_record_date("2024-3-5") == "2024-03-05"


def test_aware_datetime_uses_local_day() -> None:
    moment = datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc)
    assert format_record_date(moment) == format_record_date(moment.astimezone())


def test_malformed_key_rejected() -> None:
    with pytest.raises(ValueError):
        format_record_date("05/03/2024")


def test_shift_across_year_boundary() -> None:
    assert shift_date("2023-12-31", 1) == date(2024, 1, 1)
    assert shift_date("2024-03-01", -1) == date(2024, 2, 29)


def test_describe_date_in_spanish() -> None:
    assert describe_date("2024-03-05") == "martes, 5 de marzo de 2024"
