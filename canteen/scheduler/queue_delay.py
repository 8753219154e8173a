"""
Queue Delay Predictor

Coarse "expect ~N min wait" estimate for a canteen. Independent of the
admission path: no rush intensity, no window overlap, just the mean
longest-item prep time of the orders in the kitchen spread over its
capacity.
"""

import math
from typing import Iterable, Optional

from canteen.schemas import ActiveOrder, OrderStatus
from canteen.scheduler.load import CapacityLoadCalculator

QUEUED_STATUSES = frozenset({OrderStatus.CONFIRMED, OrderStatus.PREPARING})


class QueueDelayPredictor:

    def __init__(self, calculator: CapacityLoadCalculator, default_kitchen_capacity: int = 5):
        self.calculator = calculator
        self.default_kitchen_capacity = default_kitchen_capacity

    def predict_delay(
        self,
        active_orders: Iterable[ActiveOrder],
        canteen_id,
        kitchen_capacity: Optional[int] = None,
    ) -> int:
        """Advisory wait in minutes; 0 when the canteen has nothing queued."""
        canteen_id = str(canteen_id)
        queued = [
            order for order in active_orders
            if order.canteen_id == canteen_id and order.status in QUEUED_STATUSES
        ]
        if not queued:
            return 0

        capacity = kitchen_capacity if kitchen_capacity is not None else self.default_kitchen_capacity
        mean_prep = sum(self.calculator.max_prep_time(order.items) for order in queued) / len(queued)
        # A non-positive capacity would divide by zero; treat it as a single station
        return math.ceil(mean_prep / max(capacity, 1))
