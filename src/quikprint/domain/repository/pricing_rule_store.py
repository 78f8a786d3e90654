"""Abstract store of per-product pricing rules."""

from __future__ import annotations

from abc import ABC, abstractmethod

from quikprint.domain.model.pricing import (
    AddOn,
    DimensionalPricing,
    PricingRule,
    PricingRules,
    PricingTier,
)


class PricingRuleStore(ABC):

    @abstractmethod
    def get_tiers(self, product_id: str) -> list[PricingTier]:
        """Return the product's quantity tiers ordered by ascending min_qty."""

    @abstractmethod
    def get_dimensional_pricing(self, product_id: str) -> DimensionalPricing | None:
        """Return the product's area pricing, if it has one."""

    @abstractmethod
    def get_add_ons(self, product_id: str) -> list[AddOn]:
        """Return the product's *enabled* add-ons only."""

    @abstractmethod
    def get_rules(self, product_id: str) -> list[PricingRule]:
        """Return the product's fee rules."""

    def rules_for(self, product_id: str) -> PricingRules:
        """Fetch everything the pricing engine needs in one bundle."""
        return PricingRules(
            tiers=tuple(self.get_tiers(product_id)),
            dimensional=self.get_dimensional_pricing(product_id),
            add_ons=tuple(a for a in self.get_add_ons(product_id) if a.enabled),
            rules=tuple(self.get_rules(product_id)),
        )
