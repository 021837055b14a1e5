"""
Shared field types for request/response schemas.
"""
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

from oficina.services.totals import parse_money


def _money(value: Any) -> Any:
    if value is None or value == "":
        return None
    amount = parse_money(value)
    if amount is None:
        raise ValueError("Invalid amount")
    return amount


# Accepts 35.9, "35,90" or "R$ 1.234,56"; serialized to JSON as a number
Money = Annotated[
    Decimal,
    BeforeValidator(_money),
    PlainSerializer(float, return_type=float, when_used="json"),
]


def strip_or_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("Field cannot be null")
    return value
