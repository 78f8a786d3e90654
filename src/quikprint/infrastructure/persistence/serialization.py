"""Raw <-> domain conversions shared by the JSON repositories."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from quikprint.domain.model.value_objects import Money


def money_to_raw(money: Money) -> str:
    return str(money.amount)


def money_from_raw(raw: Any, currency: str) -> Money:
    return Money(Decimal(str(raw)), currency)


def optional_money_from_raw(raw: Any, currency: str) -> Money | None:
    if raw is None:
        return None
    return money_from_raw(raw, currency)


def dt_to_raw(value: datetime) -> str:
    return value.isoformat()


def dt_from_raw(raw: str) -> datetime:
    return datetime.fromisoformat(raw)
