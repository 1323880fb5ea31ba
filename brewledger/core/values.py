"""
Value types shared by the ledger entities.

Quantities and prices are Decimals internally. Text parsing (comma or period
as decimal separator, dd/mm/yyyy dates) is confined to these validators, which
run only when data enters a model.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

DATE_FORMAT = "%d/%m/%Y"
ISO_DATE_FORMAT = "%Y-%m-%d"
_NO_DATE = {"", "N/A", "N/D"}
YEAR_KEY = re.compile(r"[0-9]{4}")


def parse_ledger_date(value: Any) -> date:
    """Parse a dd/mm/yyyy or ISO date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        for fmt in (DATE_FORMAT, ISO_DATE_FORMAT):
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
    raise ValueError(f"invalid date {value!r}, expected dd/mm/yyyy")


def parse_optional_date(value: Any) -> date | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().upper() in _NO_DATE:
        return None
    return parse_ledger_date(value)


def format_ledger_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def parse_decimal(value: Any) -> Decimal:
    """Parse a number, accepting a comma as decimal separator."""
    if isinstance(value, bool):
        raise ValueError(f"invalid number {value!r}")
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(repr(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", ".")
        try:
            number = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"invalid number {value!r}") from None
    else:
        raise ValueError(f"invalid number {value!r}")
    if not number.is_finite():
        raise ValueError(f"invalid number {value!r}")
    return number


def parse_optional_decimal(value: Any) -> Decimal | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_decimal(value)


def decimal_to_json(value: Decimal) -> float | int:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def normalize(text: str | None) -> str:
    """Case/whitespace-insensitive identity used for every ledger key."""
    return (text or "").strip().upper()


Quantity = Annotated[
    Decimal,
    BeforeValidator(parse_decimal),
    PlainSerializer(decimal_to_json, when_used="json"),
]

OptionalQuantity = Annotated[
    Decimal | None,
    BeforeValidator(parse_optional_decimal),
    PlainSerializer(decimal_to_json, when_used="json-unless-none"),
]

LedgerDate = Annotated[
    date,
    BeforeValidator(parse_ledger_date),
    PlainSerializer(format_ledger_date, return_type=str, when_used="json"),
]

OptionalLedgerDate = Annotated[
    date | None,
    BeforeValidator(parse_optional_date),
    PlainSerializer(format_ledger_date, return_type=str, when_used="json-unless-none"),
]


def is_year_key(value: Any) -> bool:
    """True for a 4-digit year string such as ``"2024"``."""
    return isinstance(value, str) and YEAR_KEY.fullmatch(value) is not None
