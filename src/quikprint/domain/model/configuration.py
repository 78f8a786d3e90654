"""Customer configuration of a product, as a tagged variant map.

Shoppers send a free-form JSON object (``{"size": "a4", "width": 10,
"rush": true}``).  It is converted once, at the boundary, into
``Text`` / ``Number`` / ``Flag`` variants so the pricing engine can ask
for the shape it needs instead of probing raw values.  Values of any
other shape (lists, objects, null) are dropped: malformed input is
treated as absent, never rejected.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Union


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Number:
    value: Decimal


@dataclass(frozen=True)
class Flag:
    value: bool


ConfigValue = Union[Text, Number, Flag]


def _to_variant(raw: Any) -> ConfigValue | None:
    # bool is an int subclass, so it must be checked first
    if isinstance(raw, bool):
        return Flag(raw)
    if isinstance(raw, (int, float, Decimal)):
        try:
            number = Decimal(str(raw))
        except InvalidOperation:
            return None
        if not number.is_finite():
            return None
        return Number(number)
    if isinstance(raw, str):
        return Text(raw)
    return None


class Configuration(Mapping[str, ConfigValue]):
    """Immutable map of option identifier to a typed value."""

    def __init__(self, values: Mapping[str, ConfigValue] | None = None) -> None:
        self._values: dict[str, ConfigValue] = dict(values or {})

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any] | None) -> Configuration:
        values: dict[str, ConfigValue] = {}
        for key, value in (raw or {}).items():
            variant = _to_variant(value)
            if variant is not None:
                values[str(key)] = variant
        return cls(values)

    def to_raw(self) -> dict[str, Any]:
        raw: dict[str, Any] = {}
        for key, variant in self._values.items():
            if isinstance(variant, Number):
                number = variant.value
                raw[key] = int(number) if number == number.to_integral_value() else float(number)
            else:
                raw[key] = variant.value
        return raw

    # --- Mapping interface ----------------------------------------------------

    def __getitem__(self, key: str) -> ConfigValue:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Configuration):
            return self._values == other._values
        return NotImplemented

    def __repr__(self) -> str:
        return f"Configuration({self._values!r})"

    # --- Typed accessors ------------------------------------------------------

    def text(self, key: str) -> str | None:
        variant = self._values.get(key)
        return variant.value if isinstance(variant, Text) else None

    def number(self, key: str) -> Decimal | None:
        variant = self._values.get(key)
        return variant.value if isinstance(variant, Number) else None

    def flag(self, key: str) -> bool:
        variant = self._values.get(key)
        return isinstance(variant, Flag) and variant.value

    def quantity(self) -> int:
        """Quantity carried inside the configuration, or 0 when there is none.

        Numbers are truncated.  Text such as ``"250"`` or ``"250 pcs"`` has
        its digits collected, except when it is a UUID (a choice id, not a
        count).
        """
        variant = self._values.get("quantity")
        if isinstance(variant, Number):
            return int(variant.value)
        if isinstance(variant, Text):
            try:
                uuid.UUID(variant.value)
            except ValueError:
                digits = "".join(c for c in variant.value if c.isascii() and c.isdigit())
                return int(digits) if digits else 0
        return 0
