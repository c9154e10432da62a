from datetime import date, datetime, timezone

import pytest

from comisiones.utils.dates import month_bounds, month_key, month_label, parse_invoice_date, shift_month


def test_plain_date_string_is_taken_literally():
    assert parse_invoice_date("2024-03-01") == date(2024, 3, 1)
    assert parse_invoice_date(" 2024-03-31 ") == date(2024, 3, 31)


def test_naive_datetime_keeps_calendar_day():
    assert parse_invoice_date("2024-03-15T23:59:00") == date(2024, 3, 15)
    assert parse_invoice_date(datetime(2024, 3, 15, 0, 1)) == date(2024, 3, 15)


def test_aware_datetime_at_noon_utc_keeps_day():
    value = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
    assert parse_invoice_date(value) == date(2024, 3, 15)
    assert parse_invoice_date("2024-03-15T12:00:00Z") == date(2024, 3, 15)


def test_empty_values():
    assert parse_invoice_date(None) is None
    assert parse_invoice_date("") is None


def test_invalid_values():
    with pytest.raises(ValueError):
        parse_invoice_date("ayer")
    with pytest.raises(TypeError):
        parse_invoice_date(20240315)


def test_month_bounds():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2023, 2) == (date(2023, 2, 1), date(2023, 2, 28))
    assert month_bounds(2024, 12) == (date(2024, 12, 1), date(2024, 12, 31))


def test_shift_month_crosses_years():
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2024, 12, 1) == (2025, 1)
    assert shift_month(2024, 3, -14) == (2023, 1)


def test_month_key_and_label():
    assert month_key(date(2024, 3, 5)) == "2024-03"
    assert month_label(2024, 3) == "Marzo 2024"
