"""
Capacity Load Calculator

Pure reductions over order snapshots: which orders occupy a time
window, and how many items they keep in the kitchen.
"""

from typing import Iterable, Sequence

from canteen.schemas import ActiveOrder, OrderItemSnapshot, TimeWindow


class CapacityLoadCalculator:
    """Interval-overlap and item-count helpers shared by the scheduler."""

    def __init__(self, default_prep_time_minutes: int = 10):
        self.default_prep_time_minutes = default_prep_time_minutes

    @staticmethod
    def occupies(order: ActiveOrder, window: TimeWindow) -> bool:
        """
        True when the order's occupied span overlaps ``window``.

        The occupied span is ``[scheduled_prep_time, pickup_window.end)``.
        """
        return (
            order.scheduled_prep_time < window.end
            and order.pickup_window.end > window.start
        )

    def orders_in_window(
        self,
        orders: Iterable[ActiveOrder],
        window: TimeWindow,
    ) -> list[ActiveOrder]:
        return [order for order in orders if self.occupies(order, window)]

    @staticmethod
    def item_count(items: Iterable[OrderItemSnapshot]) -> int:
        return sum(item.quantity for item in items)

    def total_quantity(self, orders: Iterable[ActiveOrder]) -> int:
        """Sum of item quantities across every given order."""
        return sum(order.total_quantity for order in orders)

    def prep_time_of(self, item: OrderItemSnapshot) -> int:
        # A missing or zero prep time falls back to the default
        return item.prep_time_minutes or self.default_prep_time_minutes

    def max_prep_time(self, items: Sequence[OrderItemSnapshot]) -> int:
        """Longest prep time among ``items``; 0 for an empty order."""
        if not items:
            return 0
        return max(self.prep_time_of(item) for item in items)
