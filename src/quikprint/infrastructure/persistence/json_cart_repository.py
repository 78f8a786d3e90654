"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

import uuid
from pathlib import Path

from quikprint.domain.exceptions import EntityNotFoundError
from quikprint.domain.model.cart import CartItem
from quikprint.domain.model.configuration import Configuration
from quikprint.domain.repository.cart_repository import CartRepository
from quikprint.infrastructure.persistence.json_store import JsonStore
from quikprint.infrastructure.persistence.serialization import (
    dt_from_raw,
    dt_to_raw,
    money_from_raw,
    money_to_raw,
)


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonStore(file_path, ("cart_items",))

    def get_items(self, user_id: str) -> list[CartItem]:
        return [
            self._to_domain(raw)
            for raw in self._store.read()["cart_items"]
            if raw["user_id"] == user_id
        ]

    def get_item(self, item_id: str) -> CartItem | None:
        for raw in self._store.read()["cart_items"]:
            if raw["id"] == item_id:
                return self._to_domain(raw)
        return None

    def add(self, item: CartItem) -> None:
        if item.id is None:
            item.id = str(uuid.uuid4())
        with self._store.transaction() as doc:
            doc["cart_items"].append(self._to_raw(item))

    def update_item(self, item: CartItem) -> None:
        with self._store.transaction() as doc:
            rows = doc["cart_items"]
            index = self._index_of(rows, item.id)
            rows[index] = self._to_raw(item)

    def remove_item(self, item_id: str) -> None:
        with self._store.transaction() as doc:
            rows = doc["cart_items"]
            del rows[self._index_of(rows, item_id)]

    def clear(self, user_id: str) -> None:
        with self._store.transaction() as doc:
            doc["cart_items"] = [r for r in doc["cart_items"] if r["user_id"] != user_id]

    @staticmethod
    def _index_of(rows: list[dict], item_id: str | None) -> int:
        for index, raw in enumerate(rows):
            if raw["id"] == item_id:
                return index
        raise EntityNotFoundError(f"Cart item {item_id} not found")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: CartItem) -> dict:
        return {
            "id": item.id,
            "user_id": item.user_id,
            "product_id": item.product_id,
            "quantity": item.quantity,
            "configuration": item.configuration.to_raw(),
            "total_price": money_to_raw(item.total_price),
            "currency": item.total_price.currency,
            "uploaded_file": item.uploaded_file,
            "created_at": dt_to_raw(item.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> CartItem:
        return CartItem(
            id=raw["id"],
            user_id=raw["user_id"],
            product_id=raw["product_id"],
            quantity=raw["quantity"],
            configuration=Configuration.from_raw(raw.get("configuration")),
            total_price=money_from_raw(raw["total_price"], raw["currency"]),
            uploaded_file=raw.get("uploaded_file"),
            created_at=dt_from_raw(raw["created_at"]),
        )
