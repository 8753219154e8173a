from __future__ import annotations
from datetime import datetime, timedelta, timezone
import pytest

from canteen.core.config import Settings, get_settings
from canteen.scheduler import KitchenScheduler, reset_kitchen_scheduler
from canteen.schemas import ActiveOrder, OrderItemSnapshot, OrderStatus, TimeWindow
from canteen.services.admission import reset_admission

# Monday 11:00 UTC, outside every rush window
NOW = datetime(2025, 3, 10, 11, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _fresh_caches():
    get_settings.cache_clear()
    reset_kitchen_scheduler()
    reset_admission()
    yield
    get_settings.cache_clear()
    reset_kitchen_scheduler()
    reset_admission()


@pytest.fixture()
def now():
    return NOW


@pytest.fixture()
def scheduler():
    return KitchenScheduler(Settings())


@pytest.fixture()
def make_order():
    """Build an ActiveOrder occupying [prep_start, pickup_end)."""
    def _make(
        prep_start: datetime,
        pickup_end: datetime,
        quantity: int = 1,
        prep_time: int | None = 10,
        canteen_id: str = "c1",
        status: OrderStatus = OrderStatus.CONFIRMED,
    ) -> ActiveOrder:
        return ActiveOrder(
            canteen_id=canteen_id,
            items=[OrderItemSnapshot(quantity=quantity, prep_time_minutes=prep_time)],
            scheduled_prep_time=prep_start,
            pickup_window=TimeWindow(start=pickup_end - timedelta(minutes=10), end=pickup_end),
            status=status,
        )
    return _make
