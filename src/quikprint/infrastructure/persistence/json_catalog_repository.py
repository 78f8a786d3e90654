"""JSON-file-backed catalog and pricing rule store.

Both live in one document because they are authored together; this
core only ever reads them.  Tiers are returned sorted by ``min_qty`` so
"first matching tier" does not depend on the order rows were written in.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any

from quikprint.domain.model.pricing import (
    AddOn,
    AddOnKind,
    DimensionalPricing,
    PricingRule,
    PricingTier,
)
from quikprint.domain.model.product import (
    OptionChoice,
    OptionKind,
    Product,
    ProductOption,
)
from quikprint.domain.model.value_objects import DEFAULT_CURRENCY
from quikprint.domain.repository.pricing_rule_store import PricingRuleStore
from quikprint.domain.repository.product_catalog import ProductCatalog
from quikprint.infrastructure.persistence.json_store import JsonStore
from quikprint.infrastructure.persistence.serialization import (
    money_from_raw,
    optional_money_from_raw,
)

TABLES = ("products", "pricing_tiers", "dimensional_pricing", "add_ons", "pricing_rules")


class JsonCatalogRepository(ProductCatalog, PricingRuleStore):

    def __init__(self, file_path: Path, currency: str = DEFAULT_CURRENCY) -> None:
        self._store = JsonStore(file_path, TABLES)
        self._currency = currency

    # --- ProductCatalog interface ---------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._store.read()["products"]:
            if raw["id"] == product_id:
                return self._product_to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._product_to_domain(raw) for raw in self._store.read()["products"]]

    # --- PricingRuleStore interface -------------------------------------------

    def get_tiers(self, product_id: str) -> list[PricingTier]:
        currency = self._currency_of(product_id)
        rows = [r for r in self._store.read()["pricing_tiers"] if r["product_id"] == product_id]
        rows.sort(key=lambda r: int(r["min_qty"]))  # stable: ties keep stored order
        return [
            PricingTier(
                min_qty=int(r["min_qty"]),
                max_qty=int(r["max_qty"]),
                price=money_from_raw(r["price"], currency),
            )
            for r in rows
        ]

    def get_dimensional_pricing(self, product_id: str) -> DimensionalPricing | None:
        currency = self._currency_of(product_id)
        for r in self._store.read()["dimensional_pricing"]:
            if r["product_id"] == product_id:
                return DimensionalPricing(
                    rate_per_unit=Decimal(str(r["rate_per_unit"])),
                    unit=r.get("unit", ""),
                    min_charge=money_from_raw(r.get("min_charge", 0), currency),
                )
        return None

    def get_add_ons(self, product_id: str) -> list[AddOn]:
        return [
            AddOn(
                name=r["name"],
                kind=AddOnKind(r.get("type", "flat")),
                modifier=Decimal(str(r["price_modifier"])),
                enabled=True,
            )
            for r in self._store.read()["add_ons"]
            if r["product_id"] == product_id and r.get("enabled", True)
        ]

    def get_rules(self, product_id: str) -> list[PricingRule]:
        currency = self._currency_of(product_id)
        return [
            PricingRule(
                rule_type=r["rule_type"],
                value=money_from_raw(r["value"], currency),
                description=r.get("description", ""),
            )
            for r in self._store.read()["pricing_rules"]
            if r["product_id"] == product_id
        ]

    # --- Serialization --------------------------------------------------------

    def _currency_of(self, product_id: str) -> str:
        product = self.get_by_id(product_id)
        return product.currency if product else self._currency

    def _product_to_domain(self, raw: dict[str, Any]) -> Product:
        currency = raw.get("currency", self._currency)
        options = [
            ProductOption(
                id=o["id"],
                name=o.get("name", o["id"]),
                kind=OptionKind(o["type"]),
                choices=tuple(
                    OptionChoice(
                        value=c["value"],
                        label=c.get("label", c["value"]),
                        price_modifier=optional_money_from_raw(c.get("price_modifier"), currency),
                    )
                    for c in o.get("options", [])
                ),
                unit=o.get("unit"),
            )
            for o in raw.get("options", [])
        ]
        return Product(
            id=raw["id"],
            name=raw["name"],
            base_price=money_from_raw(raw["base_price"], currency),
            options=options,
            min_quantity=int(raw.get("min_quantity", 1)),
        )
