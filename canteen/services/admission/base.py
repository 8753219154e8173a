"""
Order Store Abstract Base Class

Defines the narrow persistence interface the admission coordinator
needs from the host service. The host implements it over its own
database; ``InMemoryOrderStore`` serves development and tests.

Author: Khalil_Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from typing import Iterable

from canteen.schemas import ActiveOrder, OrderStatus


# Vendor workflow: which status may follow which
VALID_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.COLLECTED}),
}


class AdmissionError(Exception):
    """Base class for host-boundary failures."""


class AdmissionLockTimeout(AdmissionError):
    """The per-canteen admission lock could not be acquired in time."""

    def __init__(self, canteen_id: str, timeout: float):
        self.canteen_id = canteen_id
        self.timeout = timeout
        super().__init__(f"Admission lock for canteen {canteen_id} not acquired within {timeout}s")


class OrderNotFound(AdmissionError, KeyError):
    """No order with the given id."""


class InvalidStatusTransition(AdmissionError, ValueError):
    """The requested status does not follow the current one."""

    def __init__(self, current: OrderStatus, requested: OrderStatus):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from {current.value} to {requested.value}")


def check_transition(current: OrderStatus, requested: OrderStatus) -> None:
    """
    Validate a status change.

    Raises:
        InvalidStatusTransition: If ``requested`` may not follow ``current``
    """
    if requested not in VALID_TRANSITIONS.get(current, frozenset()):
        raise InvalidStatusTransition(current, requested)


class BaseOrderStore(ABC):
    """
    Abstract base class for order stores.

    Example:
        >>> store = InMemoryOrderStore()
        >>> saved = store.add_order(order)
        >>> store.update_status(saved.order_id, OrderStatus.PREPARING)
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the store backend.

        Returns:
            str: Provider name (e.g., "memory")
        """
        pass

    @abstractmethod
    def list_orders(
        self,
        canteen_id: str,
        statuses: Iterable[OrderStatus],
    ) -> list[ActiveOrder]:
        """
        Snapshot of a canteen's orders in any of ``statuses``.

        Args:
            canteen_id: Canteen to query
            statuses: Status filter chosen by the call site

        Returns:
            list[ActiveOrder]: Immutable order snapshots
        """
        pass

    @abstractmethod
    def add_order(self, order: ActiveOrder) -> ActiveOrder:
        """
        Persist a new order.

        Args:
            order: Order to store; its ``order_id`` is assigned here

        Returns:
            ActiveOrder: The stored order with its id
        """
        pass

    @abstractmethod
    def get_order(self, order_id: str) -> ActiveOrder:
        """
        Fetch one order.

        Raises:
            OrderNotFound: If no such order exists
        """
        pass

    @abstractmethod
    def update_status(self, order_id: str, status: OrderStatus) -> ActiveOrder:
        """
        Move an order along the vendor workflow.

        Raises:
            OrderNotFound: If no such order exists
            InvalidStatusTransition: If the change is not allowed
        """
        pass
