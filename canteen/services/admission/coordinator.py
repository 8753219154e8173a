"""
Admission Coordinator with Concurrency Control

Runs the check-then-commit sequence for new orders:

    1. snapshot the canteen's active orders
    2. ask the scheduler whether the pickup slot is feasible
    3. persist the order if it was admitted

The three steps are not atomic on their own; two concurrent requests
could each see spare capacity and jointly overshoot the kitchen. Each
canteen therefore gets a serialization point: an in-process lock for
request threads plus a file lock shared by every worker process that
points at the same lock directory.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
import math
import re
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Sequence

from filelock import FileLock, Timeout

from canteen.core.config import get_settings
from canteen.schemas import (
    ActiveOrder,
    AdmissionDecision,
    CanteenLoadSummary,
    KitchenQueueEntry,
    OrderItemSnapshot,
    OrderStatus,
    TimeWindow,
)
from canteen.scheduler import KitchenScheduler, get_kitchen_scheduler
from canteen.services.admission.base import AdmissionLockTimeout, BaseOrderStore

logger = logging.getLogger(__name__)

# Orders that count against kitchen capacity at admission time
ADMISSION_STATUSES = (OrderStatus.CONFIRMED, OrderStatus.PREPARING)

# Orders shown on the vendor's kitchen queue
QUEUE_STATUSES = (OrderStatus.CONFIRMED, OrderStatus.PREPARING, OrderStatus.READY)

URGENT_WITHIN_MINUTES = 5


class AdmissionCoordinator:
    """
    Per-canteen serialized order admission.

    Attributes:
        store: Host order store
        scheduler: Kitchen scheduler consulted for every admission
        lock_dir: Directory holding one lock file per canteen
        lock_timeout: Seconds to wait for a canteen lock (-1 waits forever)

    Example:
        >>> coordinator = AdmissionCoordinator(InMemoryOrderStore())
        >>> decision = coordinator.place_order(
        ...     canteen_id="north-block",
        ...     kitchen_capacity=5,
        ...     items=[OrderItemSnapshot(quantity=1, prep_time_minutes=10)],
        ...     pickup_window=window,
        ...     now=now,
        ... )
        >>> decision.admitted
        True
    """

    def __init__(
        self,
        store: BaseOrderStore,
        scheduler: Optional[KitchenScheduler] = None,
        lock_dir: Optional[str] = None,
        lock_timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.store = store
        self.scheduler = scheduler or get_kitchen_scheduler()
        self.lock_dir = Path(lock_dir or settings.admission_lock_dir)
        self.lock_timeout = settings.admission_lock_timeout if lock_timeout is None else lock_timeout

        self._local_locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

        logger.info(
            f"AdmissionCoordinator initialized "
            f"(store={self.store.provider_name}, lock_dir={self.lock_dir})"
        )

    # =========================================================================
    # LOCKING
    # =========================================================================

    def _ensure_lock_dir(self) -> None:
        """Create lock directory if needed."""
        if not self.lock_dir.exists():
            self.lock_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created lock directory: {self.lock_dir}")

    def _local_lock(self, canteen_id: str) -> threading.Lock:
        with self._registry_lock:
            return self._local_locks.setdefault(canteen_id, threading.Lock())

    def lock_path(self, canteen_id: str) -> Path:
        safe_id = re.sub(r"[^A-Za-z0-9_.-]", "_", canteen_id)
        return self.lock_dir / f"canteen-{safe_id}.lock"

    @contextmanager
    def canteen_lock(self, canteen_id: str) -> Iterator[None]:
        """
        Hold the canteen's admission lock.

        Raises:
            AdmissionLockTimeout: If the lock is not acquired within ``lock_timeout``
        """
        canteen_id = str(canteen_id)
        local = self._local_lock(canteen_id)
        if not local.acquire(timeout=self.lock_timeout):
            logger.error(f"Lock timeout for canteen {canteen_id} (in-process)")
            raise AdmissionLockTimeout(canteen_id, self.lock_timeout)

        try:
            self._ensure_lock_dir()
            file_lock = FileLock(str(self.lock_path(canteen_id)), timeout=self.lock_timeout)
            try:
                file_lock.acquire()
            except Timeout:
                logger.error(f"Lock timeout for canteen {canteen_id}")
                raise AdmissionLockTimeout(canteen_id, self.lock_timeout) from None

            try:
                logger.debug(f"Lock acquired for canteen {canteen_id}")
                yield
            finally:
                file_lock.release()
                logger.debug(f"Lock released for canteen {canteen_id}")
        finally:
            local.release()

    # =========================================================================
    # ADMISSION
    # =========================================================================

    def place_order(
        self,
        canteen_id: str,
        kitchen_capacity: int,
        items: Sequence[OrderItemSnapshot],
        pickup_window: TimeWindow,
        now: datetime,
    ) -> AdmissionDecision:
        """
        Check feasibility and persist the order if admitted.

        The pickup time checked is the start of ``pickup_window``. Admitted
        orders are stored as confirmed with the scheduler's prep start time;
        rejected requests persist nothing.

        Returns:
            AdmissionDecision: Scheduler result and the stored order, if any
        """
        canteen_id = str(canteen_id)
        items = tuple(items)

        with self.canteen_lock(canteen_id):
            snapshot = self.store.list_orders(canteen_id, ADMISSION_STATUSES)
            result = self.scheduler.check_feasibility(
                pickup_time=pickup_window.start,
                items=items,
                active_orders=snapshot,
                kitchen_capacity=kitchen_capacity,
                now=now,
            )
            if not result.feasible:
                logger.info(
                    f"Canteen {canteen_id}: rejected pickup "
                    f"{pickup_window.start.isoformat()} ({result.reason})"
                )
                return AdmissionDecision(result=result)

            order = self.store.add_order(ActiveOrder(
                canteen_id=canteen_id,
                items=items,
                scheduled_prep_time=result.scheduled_prep_time,
                pickup_window=pickup_window,
                status=OrderStatus.CONFIRMED,
            ))

        logger.info(
            f"Canteen {canteen_id}: admitted order {order.order_id}, "
            f"prep starts {order.scheduled_prep_time.isoformat()}"
        )
        return AdmissionDecision(result=result, order=order)

    # =========================================================================
    # ADVISORY VIEWS
    # =========================================================================

    def kitchen_queue(self, canteen_id: str, now: datetime) -> list[KitchenQueueEntry]:
        """Vendor queue ordered by prep start, flagging orders due within 5 minutes."""
        orders = sorted(
            self.store.list_orders(str(canteen_id), QUEUE_STATUSES),
            key=lambda o: o.scheduled_prep_time,
        )
        entries = []
        for order in orders:
            seconds = (order.scheduled_prep_time - now).total_seconds()
            # Half-up rounding to whole minutes
            minutes = math.floor(seconds / 60 + 0.5)
            entries.append(KitchenQueueEntry(
                order=order,
                minutes_until_prep=minutes,
                is_urgent=minutes <= URGENT_WITHIN_MINUTES and order.status == OrderStatus.CONFIRMED,
            ))
        return entries

    def load_summary(self, canteen_id: str, kitchen_capacity: int) -> CanteenLoadSummary:
        """Active order count, item load and advisory wait for a canteen."""
        canteen_id = str(canteen_id)
        active = self.store.list_orders(canteen_id, ADMISSION_STATUSES)
        return CanteenLoadSummary(
            canteen_id=canteen_id,
            active_order_count=len(active),
            current_load=self.scheduler.calculator.total_quantity(active),
            max_capacity=kitchen_capacity,
            queue_delay_minutes=self.scheduler.predict_queue_delay(
                active, canteen_id, kitchen_capacity
            ),
        )
