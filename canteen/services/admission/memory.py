"""
In-Memory Order Store

Dictionary-backed order store for development mode and tests.
Thread-safe; every read returns immutable snapshots.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
import threading
import uuid
from typing import Iterable

from canteen.schemas import ActiveOrder, OrderStatus
from canteen.services.admission.base import (
    BaseOrderStore,
    OrderNotFound,
    check_transition,
)

logger = logging.getLogger(__name__)


class InMemoryOrderStore(BaseOrderStore):
    """Order store kept in process memory."""

    def __init__(self):
        self._orders: dict[str, ActiveOrder] = {}
        self._lock = threading.Lock()

    @property
    def provider_name(self) -> str:
        return "memory"

    @staticmethod
    def _new_order_id() -> str:
        return f"ORD-{uuid.uuid4().hex[:10].upper()}"

    def list_orders(
        self,
        canteen_id: str,
        statuses: Iterable[OrderStatus],
    ) -> list[ActiveOrder]:
        wanted = set(statuses)
        canteen_id = str(canteen_id)
        with self._lock:
            return [
                order for order in self._orders.values()
                if order.canteen_id == canteen_id and order.status in wanted
            ]

    def add_order(self, order: ActiveOrder) -> ActiveOrder:
        stored = order.model_copy(update={"order_id": order.order_id or self._new_order_id()})
        with self._lock:
            self._orders[stored.order_id] = stored
        logger.debug(f"Stored order {stored.order_id} for canteen {stored.canteen_id}")
        return stored

    def get_order(self, order_id: str) -> ActiveOrder:
        with self._lock:
            try:
                return self._orders[order_id]
            except KeyError:
                raise OrderNotFound(order_id) from None

    def update_status(self, order_id: str, status: OrderStatus) -> ActiveOrder:
        with self._lock:
            try:
                current = self._orders[order_id]
            except KeyError:
                raise OrderNotFound(order_id) from None
            check_transition(current.status, status)
            updated = current.model_copy(update={"status": status})
            self._orders[order_id] = updated
        logger.info(f"Order {order_id}: {current.status.value} -> {status.value}")
        return updated
