# backend/app/services/validation.py

# Pure checks for one raw record (a CSV row or a create/update body).
# Nothing here raises: a bad record comes back as Rejected(reason) so the
# ingestion pipeline can count it and move on to the next row.

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional, Union

DATE_FORMAT = "%d-%m-%Y"

# Rejection reasons
INVALID_DATE = "invalid_date"
INVALID_AMOUNT = "invalid_amount"
MISSING_CURRENCY = "missing_currency"


@dataclass(frozen=True)
class ValidRow:
    date: date
    description: Optional[str]
    amount: float
    currency: str


@dataclass(frozen=True)
class Rejected:
    reason: str
    value: Any = None


def parse_date(value: Any) -> Optional[date]:
    """DD-MM-YYYY -> date, or None when missing/unparseable."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def parse_body_date(value: Any) -> Optional[date]:
    """
    Request-body dates: DD-MM-YYYY, or the ISO YYYY-MM-DD that responses carry
    (clients PUT back what they read). CSV rows stay on parse_date.
    """
    parsed = parse_date(value)
    if parsed is not None or not isinstance(value, str):
        return parsed
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def parse_amount(value: Any) -> Optional[float]:
    """Finite number > 0, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def parse_currency(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def validate_row(raw: Mapping[str, Any]) -> Union[ValidRow, Rejected]:
    """
    Check one record keyed by the CSV header names (Date, Description, Amount, Currency).

    Order matters only for which reason is reported: date, then amount, then currency.
    Description is passed through untouched.
    """
    parsed_date = parse_date(raw.get("Date"))
    if parsed_date is None:
        return Rejected(INVALID_DATE, raw.get("Date"))

    amount = parse_amount(raw.get("Amount"))
    if amount is None:
        return Rejected(INVALID_AMOUNT, raw.get("Amount"))

    currency = parse_currency(raw.get("Currency"))
    if currency is None:
        return Rejected(MISSING_CURRENCY, raw.get("Currency"))

    return ValidRow(
        date=parsed_date,
        description=raw.get("Description"),
        amount=amount,
        currency=currency,
    )
