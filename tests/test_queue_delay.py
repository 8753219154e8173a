from datetime import timedelta

from canteen.schemas import OrderStatus


def test_no_matching_orders(scheduler, now, make_order):
    other = make_order(now, now + timedelta(minutes=20), canteen_id="c2")
    assert scheduler.predict_queue_delay([], "c1") == 0
    assert scheduler.predict_queue_delay([other], "c1") == 0


def test_single_order(scheduler, now, make_order):
    order = make_order(now, now + timedelta(minutes=30), prep_time=20)
    assert scheduler.predict_queue_delay([order], "c1", 5) == 4


def test_default_capacity(scheduler, now, make_order):
    order = make_order(now, now + timedelta(minutes=30), prep_time=20)
    assert scheduler.predict_queue_delay([order], "c1") == 4


def test_mean_of_longest_prep_times(scheduler, now, make_order):
    orders = [
        make_order(now, now + timedelta(minutes=30), prep_time=10),
        make_order(now, now + timedelta(minutes=30), prep_time=25, status=OrderStatus.PREPARING),
    ]
    # mean 17.5 / 5 = 3.5
    assert scheduler.predict_queue_delay(orders, "c1", 5) == 4


def test_only_confirmed_and_preparing_count(scheduler, now, make_order):
    orders = [
        make_order(now, now + timedelta(minutes=30), prep_time=10),
        make_order(now, now + timedelta(minutes=30), prep_time=50, status=OrderStatus.READY),
        make_order(now, now + timedelta(minutes=30), prep_time=50, status=OrderStatus.CANCELLED),
    ]
    assert scheduler.predict_queue_delay(orders, "c1", 5) == 2


def test_numeric_canteen_ids(scheduler, now, make_order):
    order = make_order(now, now + timedelta(minutes=30), prep_time=20, canteen_id=7)
    assert scheduler.predict_queue_delay([order], 7, 5) == 4


def test_non_positive_capacity_does_not_divide_by_zero(scheduler, now, make_order):
    order = make_order(now, now + timedelta(minutes=30), prep_time=20)
    assert scheduler.predict_queue_delay([order], "c1", 0) == 20
