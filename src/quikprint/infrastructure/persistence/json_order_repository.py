"""JSON-file-backed implementation of OrderRepository.

Orders, line items, status history and notes are kept as separate
tables of one document, like the rows of a relational schema.  Every
multi-row write (order + items + history, status + history) happens in
a single ``JsonStore.transaction``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from quikprint.domain.exceptions import EntityNotFoundError
from quikprint.domain.model.configuration import Configuration
from quikprint.domain.model.order import (
    Order,
    OrderLineItem,
    OrderNote,
    OrderStatus,
    ShippingAddress,
    StatusHistoryEntry,
)
from quikprint.domain.repository.order_repository import OrderRepository
from quikprint.infrastructure.persistence.json_store import Document, JsonStore
from quikprint.infrastructure.persistence.serialization import (
    dt_from_raw,
    dt_to_raw,
    money_from_raw,
    money_to_raw,
)

TABLES = ("orders", "order_items", "order_status_history", "order_notes")
ORDER_NUMBER_PREFIX = "ORD"


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonStore(file_path, TABLES)

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> None:
        with self._store.transaction() as doc:
            number = self._next_order_number(doc, order.created_at)
            doc["orders"].append(self._order_to_raw(order, number))
            for item in order.items:
                doc["order_items"].append(self._item_to_raw(order.id, item))
            doc["order_status_history"].append(self._history_to_raw(order.creation_entry()))
        # Only visible to the caller once the transaction has committed.
        order.order_number = number

    def get_by_id(self, order_id: str) -> Order | None:
        return self._find(lambda raw: raw["id"] == order_id)

    def get_by_order_number(self, order_number: str) -> Order | None:
        return self._find(lambda raw: raw["order_number"] == order_number)

    def list_by_user(self, user_id: str) -> list[Order]:
        return self._list(lambda raw: raw["user_id"] == user_id)

    def list_all(self, status: OrderStatus | None = None) -> list[Order]:
        if status is None:
            return self._list(lambda raw: True)
        return self._list(lambda raw: raw["status"] == status.value)

    def record_transition(
        self,
        entry: StatusHistoryEntry,
        expected: OrderStatus | None = None,
    ) -> bool:
        with self._store.transaction() as doc:
            raw = next((o for o in doc["orders"] if o["id"] == entry.order_id), None)
            if raw is None:
                raise EntityNotFoundError(f"Order {entry.order_id} not found")
            if expected is not None and raw["status"] != expected.value:
                return False
            raw["status"] = entry.status.value
            raw["updated_at"] = dt_to_raw(entry.created_at)
            doc["order_status_history"].append(self._history_to_raw(entry))
        return True

    def add_note(self, note: OrderNote) -> None:
        with self._store.transaction() as doc:
            doc["order_notes"].append(
                {
                    "id": note.id,
                    "order_id": note.order_id,
                    "note": note.note,
                    "created_by": note.created_by,
                    "created_at": dt_to_raw(note.created_at),
                }
            )

    def get_status_history(self, order_id: str) -> list[StatusHistoryEntry]:
        rows = [r for r in self._store.read()["order_status_history"] if r["order_id"] == order_id]
        entries = [
            StatusHistoryEntry(
                id=r["id"],
                order_id=r["order_id"],
                status=OrderStatus(r["status"]),
                note=r.get("note", ""),
                created_by=r.get("created_by"),
                created_at=dt_from_raw(r["created_at"]),
            )
            for r in rows
        ]
        return list(reversed(entries))

    def get_notes(self, order_id: str) -> list[OrderNote]:
        rows = [r for r in self._store.read()["order_notes"] if r["order_id"] == order_id]
        notes = [
            OrderNote(
                id=r["id"],
                order_id=r["order_id"],
                note=r["note"],
                created_by=r.get("created_by"),
                created_at=dt_from_raw(r["created_at"]),
            )
            for r in rows
        ]
        return list(reversed(notes))

    # --- Queries --------------------------------------------------------------

    def _find(self, predicate) -> Order | None:
        doc = self._store.read()
        for raw in doc["orders"]:
            if predicate(raw):
                return self._to_domain(raw, doc)
        return None

    def _list(self, predicate) -> list[Order]:
        doc = self._store.read()
        orders = [self._to_domain(raw, doc) for raw in doc["orders"] if predicate(raw)]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders

    @staticmethod
    def _next_order_number(doc: Document, created_at: datetime) -> str:
        sequence = doc.get("order_sequence", 0) + 1
        doc["order_sequence"] = sequence
        day = created_at.astimezone(timezone.utc).strftime("%Y%m%d")
        return f"{ORDER_NUMBER_PREFIX}-{day}-{sequence:06d}"

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _order_to_raw(order: Order, order_number: str) -> dict:
        addr = order.shipping_address
        return {
            "id": order.id,
            "order_number": order_number,
            "user_id": order.user_id,
            "status": order.status.value,
            "currency": order.total.currency,
            "subtotal": money_to_raw(order.subtotal),
            "shipping": money_to_raw(order.shipping),
            "tax": money_to_raw(order.tax),
            "total": money_to_raw(order.total),
            "shipping_address": {
                "name": addr.name,
                "street": addr.street,
                "city": addr.city,
                "state": addr.state,
                "zip": addr.zip,
                "country": addr.country,
            },
            "created_at": dt_to_raw(order.created_at),
            "updated_at": dt_to_raw(order.updated_at),
        }

    @staticmethod
    def _item_to_raw(order_id: str, item: OrderLineItem) -> dict:
        return {
            "id": item.id,
            "order_id": order_id,
            "product_id": item.product_id,
            "quantity": item.quantity,
            "configuration": item.configuration.to_raw(),
            "unit_price": money_to_raw(item.unit_price),
            "total_price": money_to_raw(item.total_price),
            "uploaded_file": item.uploaded_file,
        }

    @staticmethod
    def _history_to_raw(entry: StatusHistoryEntry) -> dict:
        return {
            "id": entry.id,
            "order_id": entry.order_id,
            "status": entry.status.value,
            "note": entry.note,
            "created_by": entry.created_by,
            "created_at": dt_to_raw(entry.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict, doc: Document) -> Order:
        currency = raw["currency"]
        items = [
            OrderLineItem(
                id=i["id"],
                product_id=i["product_id"],
                quantity=i["quantity"],
                configuration=Configuration.from_raw(i.get("configuration")),
                unit_price=money_from_raw(i["unit_price"], currency),
                total_price=money_from_raw(i["total_price"], currency),
                uploaded_file=i.get("uploaded_file"),
            )
            for i in doc["order_items"]
            if i["order_id"] == raw["id"]
        ]
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            user_id=raw["user_id"],
            items=items,
            subtotal=money_from_raw(raw["subtotal"], currency),
            shipping=money_from_raw(raw["shipping"], currency),
            tax=money_from_raw(raw["tax"], currency),
            total=money_from_raw(raw["total"], currency),
            shipping_address=ShippingAddress(**raw["shipping_address"]),
            status=OrderStatus(raw["status"]),
            created_at=dt_from_raw(raw["created_at"]),
            updated_at=dt_from_raw(raw["updated_at"]),
        )
