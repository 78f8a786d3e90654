"""Domain service: Pricing Engine.

Turns a product definition, its pricing rules, a customer configuration
and a quantity into a ``PriceBreakdown``.  The engine is a pure
function: callers fetch the product and rules beforehand, and the same
inputs always give the same breakdown.

The headline amount is chosen by override, not accumulated:

    dimensional cost  >  quantity tier price  >  base price

Option modifiers are always added on top of whichever headline wins.
Fees and enabled add-ons are then added to the subtotal to get the total.
"""

from __future__ import annotations

from decimal import Decimal

from quikprint.domain.model.configuration import Configuration
from quikprint.domain.model.pricing import (
    RUSH_FEE,
    SETUP_FEE,
    AddOn,
    AddOnKind,
    DimensionalPricing,
    PriceBreakdown,
    PricingRule,
    PricingRules,
    PricingTier,
)
from quikprint.domain.model.product import OptionKind, Product
from quikprint.domain.model.value_objects import Money

_SELECTABLE = (OptionKind.SELECT, OptionKind.RADIO)


def calculate_price(
    product: Product,
    rules: PricingRules,
    configuration: Configuration,
    quantity: int = 0,
) -> PriceBreakdown:
    currency = product.currency

    modifiers = option_modifiers(product, configuration)
    dimensional_cost = dimensional_cost_for(rules.dimensional, configuration, currency)
    resolved_quantity = resolve_quantity(product, configuration, quantity)
    tier_price = tier_price_for(rules.tiers, resolved_quantity)
    setup_fee, rush_fee = fees_for(rules.rules, configuration, currency)

    modifier_total = Money.zero(currency)
    for amount in modifiers.values():
        modifier_total = modifier_total + amount

    headline = product.base_price
    if tier_price is not None:
        headline = tier_price
    if dimensional_cost is not None:
        headline = dimensional_cost
    subtotal = headline + modifier_total

    add_ons = add_on_amounts(rules.add_ons, subtotal)
    total = subtotal + setup_fee + rush_fee
    for amount in add_ons.values():
        total = total + amount

    return PriceBreakdown(
        base_price=product.base_price,
        option_modifiers=modifiers,
        dimensional_cost=dimensional_cost,
        tier_price=tier_price,
        add_ons=add_ons,
        setup_fee=setup_fee,
        rush_fee=rush_fee,
        subtotal=subtotal,
        total=total,
        quantity=resolved_quantity,
    )


# --- Steps ----------------------------------------------------------------------


def option_modifiers(product: Product, configuration: Configuration) -> dict[str, Money]:
    """Per-option price modifiers keyed by option *name*.

    Select/radio options contribute the chosen value's modifier.  A
    dimension option contributes its raw number as-is; area pricing is a
    separate mechanism (``dimensional_cost_for``).  Other kinds and
    values of the wrong shape contribute nothing.
    """
    modifiers: dict[str, Money] = {}
    for option in product.options:
        if option.id not in configuration:
            continue
        if option.kind in _SELECTABLE:
            chosen = configuration.text(option.id)
            if chosen is None:
                continue
            choice = option.find_choice(chosen)
            if choice is not None and choice.price_modifier is not None:
                modifiers[option.name] = choice.price_modifier
        elif option.kind is OptionKind.DIMENSION:
            value = configuration.number(option.id)
            if value is not None:
                modifiers[option.name] = Money(value, product.currency)
    return modifiers


def dimensional_cost_for(
    pricing: DimensionalPricing | None,
    configuration: Configuration,
    currency: str,
) -> Money | None:
    """Area x rate floored at the minimum charge; None when not applicable."""
    if pricing is None:
        return None
    width = configuration.number("width")
    height = configuration.number("height")
    if width is None or height is None or width <= 0 or height <= 0:
        return None
    cost = Money(width * height * pricing.rate_per_unit, currency).quantize()
    if cost < pricing.min_charge:
        cost = pricing.min_charge
    return cost


def resolve_quantity(product: Product, configuration: Configuration, quantity: int) -> int:
    """Explicit quantity, else the configuration's, else the product minimum."""
    if quantity == 0:
        quantity = configuration.quantity()
    if quantity == 0:
        quantity = product.min_quantity
    return quantity


def tier_price_for(tiers: tuple[PricingTier, ...], quantity: int) -> Money | None:
    """Price of the first tier (in stored order) containing *quantity*."""
    for tier in tiers:
        if tier.contains(quantity):
            return tier.price
    return None


def fees_for(
    rules: tuple[PricingRule, ...],
    configuration: Configuration,
    currency: str,
) -> tuple[Money, Money]:
    setup_fee = Money.zero(currency)
    rush_fee = Money.zero(currency)
    rush_requested = configuration.flag("rush")
    for rule in rules:
        if rule.rule_type == SETUP_FEE:
            setup_fee = rule.value
        elif rule.rule_type == RUSH_FEE and rush_requested:
            rush_fee = rule.value
    return setup_fee, rush_fee


def add_on_amounts(add_ons: tuple[AddOn, ...], subtotal: Money) -> dict[str, Money]:
    """Amount of each enabled add-on; percentages apply to the subtotal."""
    amounts: dict[str, Money] = {}
    for add_on in add_ons:
        if not add_on.enabled:
            continue
        if add_on.kind is AddOnKind.PERCENTAGE:
            amount = Money(
                subtotal.amount * add_on.modifier / Decimal(100), subtotal.currency
            ).quantize()
        else:
            amount = Money(add_on.modifier, subtotal.currency)
        amounts[add_on.name] = amount
    return amounts
