from datetime import timedelta

from canteen.scheduler import CapacityLoadCalculator
from canteen.schemas import OrderItemSnapshot, TimeWindow


def test_empty_inputs():
    calc = CapacityLoadCalculator()
    assert calc.total_quantity([]) == 0
    assert calc.max_prep_time([]) == 0
    assert calc.item_count([]) == 0


def test_overlap_uses_prep_start_and_pickup_end(now, make_order):
    calc = CapacityLoadCalculator()
    window = TimeWindow(start=now, end=now + timedelta(minutes=15))

    inside = make_order(now + timedelta(minutes=5), now + timedelta(minutes=25))
    spans_whole = make_order(now - timedelta(minutes=10), now + timedelta(minutes=40))
    starts_at_end = make_order(now + timedelta(minutes=15), now + timedelta(minutes=30))
    ends_at_start = make_order(now - timedelta(minutes=20), now)
    before = make_order(now - timedelta(minutes=30), now - timedelta(minutes=5))

    found = calc.orders_in_window(
        [inside, spans_whole, starts_at_end, ends_at_start, before], window
    )
    assert found == [inside, spans_whole]


def test_total_quantity_sums_all_items(now, make_order):
    calc = CapacityLoadCalculator()
    a = make_order(now, now + timedelta(minutes=20), quantity=3)
    b = make_order(now, now + timedelta(minutes=20), quantity=2)
    assert calc.total_quantity([a, b]) == 5
    assert calc.total_quantity([b, a]) == 5


def test_missing_prep_time_defaults_to_ten():
    calc = CapacityLoadCalculator()
    items = [
        OrderItemSnapshot(quantity=1, prep_time_minutes=None),
        OrderItemSnapshot(quantity=1, prep_time_minutes=4),
    ]
    assert calc.max_prep_time(items) == 10
    assert calc.max_prep_time([OrderItemSnapshot(prep_time_minutes=0)]) == 10
    assert calc.max_prep_time([OrderItemSnapshot(prep_time_minutes=25)]) == 25
