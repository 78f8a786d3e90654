"""Integration tests for the cart use cases."""

import pytest

from quikprint.application.add_to_cart import AddToCartHandler
from quikprint.application.calculate_price import CalculatePriceHandler
from quikprint.application.remove_cart_item import RemoveCartItemHandler
from quikprint.application.show_cart import ShowCartHandler
from quikprint.application.update_cart_item import UpdateCartItemHandler
from quikprint.domain.exceptions import (
    AccessDeniedError,
    EntityNotFoundError,
    ValidationError,
)
from quikprint.domain.model.cart import CartItem
from quikprint.domain.model.configuration import Configuration
from quikprint.domain.model.pricing import PricingTier
from quikprint.domain.model.product import Product
from quikprint.domain.model.value_objects import Money
from tests.fakes import FakeCartRepository, FakePricingRuleStore, FakeProductCatalog


def _setup() -> tuple[AddToCartHandler, ShowCartHandler, FakeCartRepository]:
    catalog = FakeProductCatalog(
        [Product(id="flyer", name="Flyer", base_price=Money.of("40"))]
    )
    pricing = CalculatePriceHandler(catalog, FakePricingRuleStore())
    carts = FakeCartRepository()
    return AddToCartHandler(pricing, carts), ShowCartHandler(carts), carts


class TestAddToCart:

    def test_item_priced_and_stored(self):
        add, _, carts = _setup()
        dto = add.handle("u1", "flyer", 10, {"paper": "matte"}, uploaded_file="art.pdf")
        assert dto.total_price == "40.00"
        assert dto.uploaded_file == "art.pdf"
        stored = carts.get_items("u1")
        assert len(stored) == 1
        assert stored[0].total_price == Money.of("40")
        assert stored[0].configuration.text("paper") == "matte"

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity_rejected(self, quantity):
        add, _, carts = _setup()
        with pytest.raises(ValidationError):
            add.handle("u1", "flyer", quantity, {})
        assert carts.get_items("u1") == []

    def test_unknown_product(self):
        add, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            add.handle("u1", "nope", 1, {})


class TestShowCart:

    def test_subtotal_and_count(self):
        add, show, _ = _setup()
        add.handle("u1", "flyer", 1, {})
        add.handle("u1", "flyer", 2, {})
        add.handle("u2", "flyer", 1, {})
        dto = show.handle("u1")
        assert dto.count == 2
        assert dto.subtotal == "80.00"

    def test_empty(self):
        _, show, _ = _setup()
        dto = show.handle("u1")
        assert dto.items == []
        assert dto.subtotal == "0.00"


def _edit_setup():
    catalog = FakeProductCatalog(
        [Product(id="flyer", name="Flyer", base_price=Money.of("40"))]
    )
    rules = FakePricingRuleStore()
    rules.tiers["flyer"] = [
        PricingTier(1, 99, Money.of("40")),
        PricingTier(100, 499, Money.of("150")),
    ]
    pricing = CalculatePriceHandler(catalog, rules)
    carts = FakeCartRepository()
    item = AddToCartHandler(pricing, carts).handle("u1", "flyer", 10, {"paper": "matte"})
    return (
        UpdateCartItemHandler(pricing, carts),
        RemoveCartItemHandler(carts),
        carts,
        item.id,
    )


class TestUpdateCartItem:

    def test_quantity_change_reprices(self):
        update, _, carts, item_id = _edit_setup()
        dto = update.handle(item_id, "u1", quantity=200)
        assert dto.quantity == 200
        assert dto.total_price == "150.00"
        stored = carts.get_item(item_id)
        assert stored.total_price == Money.of("150")
        assert stored.configuration.text("paper") == "matte"

    def test_configuration_replaced_quantity_kept(self):
        update, _, carts, item_id = _edit_setup()
        dto = update.handle(item_id, "u1", configuration={"paper": "gloss"})
        assert dto.quantity == 10
        assert dto.configuration == {"paper": "gloss"}
        assert carts.get_item(item_id).configuration.text("paper") == "gloss"

    def test_other_users_item(self):
        update, _, carts, item_id = _edit_setup()
        with pytest.raises(AccessDeniedError):
            update.handle(item_id, "u2", quantity=200)
        assert carts.get_item(item_id).quantity == 10

    def test_non_positive_quantity_leaves_item_alone(self):
        update, _, carts, item_id = _edit_setup()
        with pytest.raises(ValidationError):
            update.handle(item_id, "u1", quantity=0)
        assert carts.get_item(item_id).total_price == Money.of("40")

    def test_missing_item(self):
        update, _, _, _ = _edit_setup()
        with pytest.raises(EntityNotFoundError):
            update.handle("nope", "u1", quantity=2)


class TestRemoveCartItem:

    def test_removes_only_that_item(self):
        _, remove, carts, item_id = _edit_setup()
        carts.add(CartItem(None, "u1", "flyer", 1, Configuration(), Money.of("40")))
        remove.handle(item_id, "u1")
        remaining = carts.get_items("u1")
        assert item_id not in [i.id for i in remaining]
        assert len(remaining) == 1

    def test_other_users_item(self):
        _, remove, carts, item_id = _edit_setup()
        with pytest.raises(AccessDeniedError):
            remove.handle(item_id, "u2")
        assert carts.get_item(item_id) is not None

    def test_missing_item(self):
        _, remove, _, _ = _edit_setup()
        with pytest.raises(EntityNotFoundError):
            remove.handle("nope", "u1")
