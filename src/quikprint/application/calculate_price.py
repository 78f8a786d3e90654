"""Application service: Calculate Price use case (query).

Fetches the product and its rules, then hands everything to the pure
pricing engine.  A missing product is reported as not found instead of
being priced.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from quikprint.application.dto import PriceBreakdownDTO
from quikprint.domain.exceptions import EntityNotFoundError, ValidationError
from quikprint.domain.model.configuration import Configuration
from quikprint.domain.model.pricing import PriceBreakdown
from quikprint.domain.repository.pricing_rule_store import PricingRuleStore
from quikprint.domain.repository.product_catalog import ProductCatalog
from quikprint.domain.service.pricing_engine import calculate_price


class CalculatePriceHandler:

    def __init__(self, catalog: ProductCatalog, rule_store: PricingRuleStore) -> None:
        self._catalog = catalog
        self._rule_store = rule_store

    def handle(
        self,
        product_id: str,
        configuration: Mapping[str, Any] | None,
        quantity: int = 0,
    ) -> PriceBreakdownDTO:
        breakdown = self.price(product_id, Configuration.from_raw(configuration), quantity)
        return PriceBreakdownDTO.from_breakdown(breakdown)

    def price(
        self, product_id: str, configuration: Configuration, quantity: int = 0
    ) -> PriceBreakdown:
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")

        product = self._catalog.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product not found: '{product_id}'")

        rules = self._rule_store.rules_for(product.id)
        return calculate_price(product, rules, configuration, quantity)
