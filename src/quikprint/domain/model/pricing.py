"""Pricing rules attached to a product, and the computed breakdown.

Rules are read from the rule store and handed to the pricing engine
as a ``PricingRules`` bundle; the engine never fetches anything itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from quikprint.domain.model.value_objects import Money

SETUP_FEE = "setup_fee"
RUSH_FEE = "rush_fee"


@dataclass(frozen=True)
class PricingTier:
    """Flat price for any quantity in [min_qty, max_qty]."""

    min_qty: int
    max_qty: int
    price: Money

    def contains(self, quantity: int) -> bool:
        return self.min_qty <= quantity <= self.max_qty


@dataclass(frozen=True)
class DimensionalPricing:
    """Area pricing: width x height x rate, never below ``min_charge``."""

    rate_per_unit: Decimal
    unit: str
    min_charge: Money


class AddOnKind(Enum):
    FLAT = "flat"
    PERCENTAGE = "percentage"


@dataclass(frozen=True)
class AddOn:
    name: str
    kind: AddOnKind
    modifier: Decimal
    enabled: bool = True


@dataclass(frozen=True)
class PricingRule:
    rule_type: str  # setup_fee, rush_fee, ...
    value: Money
    description: str = ""


@dataclass(frozen=True)
class PricingRules:
    """Everything the rule store knows about one product.

    ``tiers`` must already be in a stable order (ascending ``min_qty``);
    when tiers overlap the first match wins.
    """

    tiers: tuple[PricingTier, ...] = ()
    dimensional: DimensionalPricing | None = None
    add_ons: tuple[AddOn, ...] = ()
    rules: tuple[PricingRule, ...] = ()


@dataclass(frozen=True)
class PriceBreakdown:
    base_price: Money
    option_modifiers: dict[str, Money]
    dimensional_cost: Money | None
    tier_price: Money | None
    add_ons: dict[str, Money]
    setup_fee: Money
    rush_fee: Money
    subtotal: Money
    total: Money
    quantity: int = 0

    @property
    def add_on_total(self) -> Money:
        result = Money.zero(self.base_price.currency)
        for amount in self.add_ons.values():
            result = result + amount
        return result
