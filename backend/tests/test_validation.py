"""Row validator: one raw CSV record -> ValidRow or Rejected(reason)."""

from datetime import date

import pytest

from app.services.validation import (
    INVALID_AMOUNT,
    INVALID_DATE,
    MISSING_CURRENCY,
    Rejected,
    ValidRow,
    parse_body_date,
    validate_row,
)


def _row(**overrides):
    row = {"Date": "15-01-2024", "Description": "Groceries", "Amount": "120.50", "Currency": "USD"}
    row.update(overrides)
    return row


def test_valid_row_is_typed():
    result = validate_row(_row())
    assert result == ValidRow(
        date=date(2024, 1, 15), description="Groceries", amount=120.5, currency="USD"
    )


def test_single_digit_day_and_month_accepted():
    result = validate_row(_row(Date="5-3-2024"))
    assert isinstance(result, ValidRow)
    assert result.date == date(2024, 3, 5)


@pytest.mark.parametrize("value", [None, "", "   ", "2024-01-15", "31-02-2024", "15/01/2024", "yesterday"])
def test_bad_date_rejected(value):
    result = validate_row(_row(Date=value))
    assert isinstance(result, Rejected)
    assert result.reason == INVALID_DATE


@pytest.mark.parametrize("value", [None, "", "0", "-5", "abc", "nan", "inf", "12abc"])
def test_bad_amount_rejected(value):
    result = validate_row(_row(Amount=value))
    assert isinstance(result, Rejected)
    assert result.reason == INVALID_AMOUNT


@pytest.mark.parametrize("value", [None, "", "   "])
def test_missing_currency_rejected(value):
    result = validate_row(_row(Currency=value))
    assert isinstance(result, Rejected)
    assert result.reason == MISSING_CURRENCY


def test_date_checked_before_amount():
    result = validate_row(_row(Date="nope", Amount="-1"))
    assert result.reason == INVALID_DATE


def test_description_passed_through_untouched():
    assert validate_row(_row(Description=None)).description is None
    assert validate_row(_row(Description="")).description == ""


def test_numeric_amount_and_padded_currency():
    result = validate_row(_row(Amount=42, Currency=" EUR "))
    assert result.amount == 42.0
    assert result.currency == "EUR"


def test_missing_columns_rejected_not_raised():
    assert validate_row({}).reason == INVALID_DATE


def test_body_date_accepts_iso_but_csv_rows_do_not():
    assert parse_body_date("2024-01-15") == date(2024, 1, 15)
    assert parse_body_date("15-01-2024") == date(2024, 1, 15)
    assert parse_body_date("2024-13-01") is None
    assert parse_body_date(None) is None
    assert validate_row(_row(Date="2024-01-15")).reason == INVALID_DATE
