"""Integration tests for the CalculatePrice use case.

Uses in-memory fakes, no file I/O.
"""

import pytest

from quikprint.application.calculate_price import CalculatePriceHandler
from quikprint.domain.exceptions import EntityNotFoundError, ValidationError
from quikprint.domain.model.pricing import PricingRule, PricingTier
from quikprint.domain.model.product import (
    OptionChoice,
    OptionKind,
    Product,
    ProductOption,
)
from quikprint.domain.model.value_objects import Money
from tests.fakes import FakePricingRuleStore, FakeProductCatalog


def _setup() -> tuple[CalculatePriceHandler, FakePricingRuleStore]:
    cards = Product(
        id="cards",
        name="Business Cards",
        base_price=Money.of("8500"),
        min_quantity=100,
        options=[
            ProductOption(
                id="finish",
                name="Finish",
                kind=OptionKind.SELECT,
                choices=(OptionChoice("gloss", "Gloss", Money.of("1500")),),
            )
        ],
    )
    rules = FakePricingRuleStore()
    # Stored out of order on purpose: the store sorts by min_qty.
    rules.tiers["cards"] = [
        PricingTier(250, 499, Money.of("12000")),
        PricingTier(100, 249, Money.of("8500")),
    ]
    rules.rules["cards"] = [PricingRule("rush_fee", Money.of("2500"))]
    return CalculatePriceHandler(FakeProductCatalog([cards]), rules), rules


class TestCalculatePrice:

    def test_breakdown_as_strings(self):
        handler, _ = _setup()
        dto = handler.handle("cards", {"finish": "gloss"}, 250)
        assert dto.currency == "NGN"
        assert dto.quantity == 250
        assert dto.base_price == "8500.00"
        assert dto.tier_price == "12000.00"
        assert dto.dimensional_cost is None
        assert dto.option_modifiers == {"Finish": "1500.00"}
        assert dto.subtotal == "13500.00"
        assert dto.total == "13500.00"

    def test_rush_fee(self):
        handler, _ = _setup()
        dto = handler.handle("cards", {"rush": True}, 100)
        assert dto.rush_fee == "2500.00"
        assert dto.total == "11000.00"

    def test_unknown_product(self):
        handler, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Product not found"):
            handler.handle("mugs", {})

    def test_negative_quantity_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="negative"):
            handler.handle("cards", {}, -1)

    def test_malformed_configuration_is_ignored(self):
        handler, _ = _setup()
        dto = handler.handle("cards", {"finish": ["gloss"], "rush": None}, 100)
        assert dto.total == "8500.00"
