"""Product aggregate, as supplied by the catalog.

Products are authored elsewhere; this core only reads them.  A product
carries its base price, minimum order quantity and the options a
customer can configure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from quikprint.domain.exceptions import ValidationError
from quikprint.domain.model.value_objects import Money


class OptionKind(Enum):
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    QUANTITY = "quantity"
    DIMENSION = "dimension"


@dataclass(frozen=True)
class OptionChoice:
    """One selectable value of a select/radio option."""

    value: str
    label: str
    price_modifier: Money | None = None  # may be negative (discount)


@dataclass(frozen=True)
class ProductOption:
    id: str
    name: str
    kind: OptionKind
    choices: tuple[OptionChoice, ...] = ()
    unit: str | None = None

    def find_choice(self, value: str) -> OptionChoice | None:
        for choice in self.choices:
            if choice.value == value:
                return choice
        return None


@dataclass
class Product:
    """A product in the catalog.

    Invariant: option identifiers are unique within the product.
    """

    id: str
    name: str
    base_price: Money
    options: list[ProductOption] = field(default_factory=list)
    min_quantity: int = 1

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for option in self.options:
            if option.id in seen:
                raise ValidationError(
                    f"Duplicate option id '{option.id}' on product '{self.name}'"
                )
            seen.add(option.id)

    @property
    def currency(self) -> str:
        return self.base_price.currency
