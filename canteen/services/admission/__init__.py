"""
Order Admission Factory

Provides the order store and admission coordinator used by the host
order workflow. Development mode runs on the in-memory store; other
modes must hand their own ``BaseOrderStore`` to ``AdmissionCoordinator``.

Usage:
    from canteen.services.admission import get_admission_coordinator

    coordinator = get_admission_coordinator()
    decision = coordinator.place_order(
        canteen_id=canteen.id,
        kitchen_capacity=canteen.kitchen_capacity,
        items=items,
        pickup_window=window,
        now=now,
    )

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
from functools import lru_cache

from canteen.core.config import get_settings
from canteen.services.admission.base import (
    VALID_TRANSITIONS,
    AdmissionError,
    AdmissionLockTimeout,
    BaseOrderStore,
    InvalidStatusTransition,
    OrderNotFound,
)
from canteen.services.admission.coordinator import (
    ADMISSION_STATUSES,
    QUEUE_STATUSES,
    AdmissionCoordinator,
)
from canteen.services.admission.memory import InMemoryOrderStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_order_store() -> BaseOrderStore:
    """
    Get the configured order store instance.

    Returns:
        BaseOrderStore: In-memory store in development mode

    Raises:
        ValueError: Outside development mode, where the host supplies the store
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Order Store: Using InMemoryOrderStore (development mode)")
        return InMemoryOrderStore()

    raise ValueError(
        f"No built-in order store for {settings.env_mode.value} mode; "
        f"pass the host's BaseOrderStore to AdmissionCoordinator"
    )


@lru_cache()
def get_admission_coordinator() -> AdmissionCoordinator:
    """Coordinator over the configured order store."""
    return AdmissionCoordinator(get_order_store())


def reset_admission() -> None:
    """
    Clear the cached store and coordinator.

    Useful for testing or when configuration changes at runtime.
    """
    get_admission_coordinator.cache_clear()
    get_order_store.cache_clear()
    logger.debug("Admission caches cleared")


__all__ = [
    "get_order_store",
    "get_admission_coordinator",
    "reset_admission",
    "AdmissionCoordinator",
    "BaseOrderStore",
    "InMemoryOrderStore",
    "AdmissionError",
    "AdmissionLockTimeout",
    "InvalidStatusTransition",
    "OrderNotFound",
    "ADMISSION_STATUSES",
    "QUEUE_STATUSES",
    "VALID_TRANSITIONS",
]
