from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
import logging
import threading
import pytest

from canteen.schemas import FeasibilityReason, OrderItemSnapshot, OrderStatus, TimeWindow
from canteen.services.admission import (
    AdmissionCoordinator,
    AdmissionLockTimeout,
    InMemoryOrderStore,
    InvalidStatusTransition,
    OrderNotFound,
    get_admission_coordinator,
    get_order_store,
)


@pytest.fixture()
def store():
    return InMemoryOrderStore()


@pytest.fixture()
def coordinator(store, scheduler, tmp_path):
    return AdmissionCoordinator(store, scheduler, lock_dir=str(tmp_path / "locks"), lock_timeout=5)


@pytest.fixture()
def window(now):
    start = now + timedelta(minutes=30)
    return TimeWindow(start=start, end=start + timedelta(minutes=10))


def _items(quantity=1, prep=10):
    return [OrderItemSnapshot(quantity=quantity, prep_time_minutes=prep)]


def test_admitted_order_is_persisted(coordinator, store, window, now):
    decision = coordinator.place_order("c1", 5, _items(), window, now)

    assert decision.admitted
    assert decision.result.feasible
    order = decision.order
    assert order.order_id.startswith("ORD-")
    assert order.status == OrderStatus.CONFIRMED
    assert order.scheduled_prep_time == window.start - timedelta(minutes=12)
    assert store.get_order(order.order_id) == order
    lock = coordinator.lock_path("c1")
    assert lock.parent.exists()
    assert lock.name == "canteen-c1.lock"


def test_rejected_order_persists_nothing(coordinator, store, now):
    soon = TimeWindow(start=now + timedelta(minutes=5), end=now + timedelta(minutes=15))
    decision = coordinator.place_order("c1", 5, _items(), soon, now)

    assert not decision.admitted
    assert decision.result.reason_code == FeasibilityReason.TOO_SOON
    assert store.list_orders("c1", [OrderStatus.CONFIRMED]) == []


def test_concurrent_admissions_never_overshoot(coordinator, store, window, now):
    # 11:30 is off-peak: effective capacity floor(5 * 0.94) = 4
    with ThreadPoolExecutor(max_workers=10) as pool:
        decisions = list(pool.map(
            lambda _: coordinator.place_order("c1", 5, _items(), window, now),
            range(10),
        ))

    admitted = [d for d in decisions if d.admitted]
    rejected = [d for d in decisions if not d.admitted]
    assert len(admitted) == 4
    assert all(d.result.reason_code == FeasibilityReason.SLOT_BUSY for d in rejected)
    assert len(store.list_orders("c1", [OrderStatus.CONFIRMED])) == 4


def test_canteens_are_independent(coordinator, window, now):
    for _ in range(4):
        assert coordinator.place_order("c1", 5, _items(), window, now).admitted
    assert not coordinator.place_order("c1", 5, _items(), window, now).admitted
    assert coordinator.place_order("c2", 5, _items(), window, now).admitted


def test_cancelling_frees_capacity(coordinator, store, window, now):
    first = coordinator.place_order("c1", 5, _items(quantity=4), window, now)
    assert not coordinator.place_order("c1", 5, _items(), window, now).admitted

    store.update_status(first.order.order_id, OrderStatus.CANCELLED)
    assert coordinator.place_order("c1", 5, _items(), window, now).admitted


def test_ready_orders_do_not_block_admission(coordinator, store, window, now):
    first = coordinator.place_order("c1", 5, _items(quantity=4), window, now)
    store.update_status(first.order.order_id, OrderStatus.PREPARING)
    store.update_status(first.order.order_id, OrderStatus.READY)
    assert coordinator.place_order("c1", 5, _items(), window, now).admitted


def test_lock_timeout(coordinator, window, now):
    coordinator.lock_timeout = 0.1
    with coordinator.canteen_lock("c1"):
        with ThreadPoolExecutor(max_workers=1) as pool:
            future = pool.submit(coordinator.place_order, "c1", 5, _items(), window, now)
            with pytest.raises(AdmissionLockTimeout) as exc:
                future.result()
    assert exc.value.canteen_id == "c1"


def test_lock_is_released_after_rejection(coordinator, now):
    soon = TimeWindow(start=now + timedelta(minutes=5), end=now + timedelta(minutes=15))
    coordinator.place_order("c1", 5, _items(), soon, now)

    acquired = threading.Event()

    def _grab():
        with coordinator.canteen_lock("c1"):
            acquired.set()

    t = threading.Thread(target=_grab)
    t.start()
    t.join(timeout=2)
    assert acquired.is_set()


# ===== store =====

def test_status_transitions(store, now, make_order):
    order = store.add_order(make_order(now, now + timedelta(minutes=20)))

    assert store.update_status(order.order_id, OrderStatus.PREPARING).status == OrderStatus.PREPARING
    with pytest.raises(InvalidStatusTransition):
        store.update_status(order.order_id, OrderStatus.COLLECTED)
    store.update_status(order.order_id, OrderStatus.READY)
    store.update_status(order.order_id, OrderStatus.COLLECTED)
    with pytest.raises(ValueError):
        store.update_status(order.order_id, OrderStatus.CANCELLED)


def test_unknown_order(store):
    with pytest.raises(OrderNotFound):
        store.get_order("ORD-MISSING")
    with pytest.raises(KeyError):
        store.update_status("ORD-MISSING", OrderStatus.READY)


def test_list_orders_filters(store, now, make_order):
    a = store.add_order(make_order(now, now + timedelta(minutes=20)))
    store.add_order(make_order(now, now + timedelta(minutes=20), canteen_id="c2"))
    store.add_order(make_order(now, now + timedelta(minutes=20), status=OrderStatus.READY))

    assert store.list_orders("c1", [OrderStatus.CONFIRMED]) == [a]


# ===== advisory views =====

def test_kitchen_queue(coordinator, store, now, make_order):
    late = store.add_order(make_order(now + timedelta(minutes=20), now + timedelta(minutes=40)))
    urgent = store.add_order(make_order(now + timedelta(minutes=3), now + timedelta(minutes=20)))
    cooking = store.add_order(make_order(
        now + timedelta(minutes=4), now + timedelta(minutes=20), status=OrderStatus.CONFIRMED,
    ))
    store.update_status(cooking.order_id, OrderStatus.PREPARING)
    store.add_order(make_order(now, now + timedelta(minutes=20), status=OrderStatus.COLLECTED))

    queue = coordinator.kitchen_queue("c1", now)

    assert [e.order.order_id for e in queue] == [urgent.order_id, cooking.order_id, late.order_id]
    assert [e.minutes_until_prep for e in queue] == [3, 4, 20]
    assert [e.is_urgent for e in queue] == [True, False, False]


def test_load_summary(coordinator, store, now, make_order):
    store.add_order(make_order(now, now + timedelta(minutes=30), quantity=2, prep_time=20))
    store.add_order(make_order(now, now + timedelta(minutes=30), quantity=1, prep_time=20))
    store.add_order(make_order(now, now + timedelta(minutes=30), quantity=9, status=OrderStatus.READY))

    summary = coordinator.load_summary("c1", 5)

    assert summary.active_order_count == 2
    assert summary.current_load == 3
    assert summary.max_capacity == 5
    assert summary.queue_delay_minutes == 4


# ===== factory =====

def test_development_factory_uses_memory_store(monkeypatch, tmp_path):
    monkeypatch.setenv("ADMISSION_LOCK_DIR", str(tmp_path))
    assert isinstance(get_order_store(), InMemoryOrderStore)
    coordinator = get_admission_coordinator()
    assert coordinator.store is get_order_store()
    assert coordinator.lock_dir == tmp_path


def test_production_requires_host_store(monkeypatch):
    monkeypatch.setenv("ENV_MODE", "production")
    with pytest.raises(ValueError):
        get_order_store()


def test_coordinator_logs_store_backend(store, scheduler, tmp_path, caplog):
    caplog.set_level(logging.INFO, logger="canteen.services.admission.coordinator")
    AdmissionCoordinator(store, scheduler, lock_dir=str(tmp_path))

    assert store.provider_name == "memory"
    assert "store=memory" in caplog.text
