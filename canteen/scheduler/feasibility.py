"""
Feasibility Checker

Admission decision for a requested pickup time. Cooking has to start
``max_prep_time + buffer`` minutes before pickup; the request is
admitted when that start lies in the future and the kitchen, with its
capacity discounted for rush hours, can take the new items alongside
the orders already cooking in that window.

The check is a pure function of its arguments. It never raises for
well-formed input: an empty order or a non-positive capacity degrade
to zero-sized or floor-limited arithmetic instead.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Sequence

from canteen.schemas import (
    ActiveOrder,
    FeasibilityReason,
    FeasibilityResult,
    OrderItemSnapshot,
    TimeWindow,
)
from canteen.scheduler.load import CapacityLoadCalculator
from canteen.scheduler.rush import RushIntensityModel
from canteen.scheduler.slots import SlotFinder

logger = logging.getLogger(__name__)


class FeasibilityChecker:
    """
    Kitchen-capacity admission check.

    Attributes:
        rush_model: Time-of-day rush intensity
        calculator: Window overlap and load reductions
        slot_finder: Alternative slot search for busy slots
        buffer_minutes: Margin between end of cooking and pickup
        rush_capacity_penalty: Capacity share lost at intensity 1.0
        min_admission_threshold: Floor on the admission threshold
        suggested_slot_minutes: Width of the "too soon" suggestion
    """

    def __init__(
        self,
        rush_model: RushIntensityModel,
        calculator: CapacityLoadCalculator,
        slot_finder: SlotFinder,
        buffer_minutes: int = 2,
        rush_capacity_penalty: float = 0.3,
        min_admission_threshold: int = 2,
        suggested_slot_minutes: int = 10,
    ):
        self.rush_model = rush_model
        self.calculator = calculator
        self.slot_finder = slot_finder
        self.buffer_minutes = buffer_minutes
        self.rush_capacity_penalty = rush_capacity_penalty
        self.min_admission_threshold = min_admission_threshold
        self.suggested_slot = timedelta(minutes=suggested_slot_minutes)

    def lead_time(self, items: Sequence[OrderItemSnapshot]) -> timedelta:
        """Time between the start of cooking and pickup."""
        return timedelta(minutes=self.calculator.max_prep_time(items) + self.buffer_minutes)

    def effective_capacity(self, kitchen_capacity: int, rush_intensity: float) -> int:
        """Kitchen capacity shrunk linearly by rush intensity."""
        return math.floor(kitchen_capacity * (1 - rush_intensity * self.rush_capacity_penalty))

    def check_feasibility(
        self,
        pickup_time: datetime,
        items: Sequence[OrderItemSnapshot],
        active_orders: Sequence[ActiveOrder],
        kitchen_capacity: int,
        now: datetime,
    ) -> FeasibilityResult:
        """
        Decide whether an order for ``items`` can be ready by ``pickup_time``.

        Args:
            pickup_time: Requested pickup instant
            items: Items of the candidate (not yet persisted) order
            active_orders: Orders already committed, filtered by the caller
            kitchen_capacity: Concurrent item capacity of the canteen
            now: Current instant

        Returns:
            FeasibilityResult: Admission with the cook start time, or a
            rejection with a suggested slot
        """
        lead_time = self.lead_time(items)
        total_item_count = self.calculator.item_count(items)
        required_start = pickup_time - lead_time

        if required_start < now:
            minimum_pickup = now + lead_time
            logger.debug(
                f"Pickup {pickup_time.isoformat()} too soon; earliest is "
                f"{minimum_pickup.isoformat()}"
            )
            return FeasibilityResult(
                feasible=False,
                reason_code=FeasibilityReason.TOO_SOON,
                reason="pickup time too soon",
                suggested_slot=TimeWindow(
                    start=minimum_pickup,
                    end=minimum_pickup + self.suggested_slot,
                ),
            )

        # Zero lead time leaves an empty cook window with nothing in it
        if required_start < pickup_time:
            cook_window = TimeWindow(start=required_start, end=pickup_time)
            concurrent = self.calculator.orders_in_window(active_orders, cook_window)
        else:
            concurrent = []

        current_load = self.calculator.total_quantity(concurrent)
        rush_intensity = self.rush_model.intensity_at(pickup_time)
        effective_capacity = self.effective_capacity(kitchen_capacity, rush_intensity)
        threshold = max(effective_capacity, self.min_admission_threshold)

        if current_load + total_item_count <= threshold:
            logger.debug(
                f"Admitted {total_item_count} items for {pickup_time.isoformat()} "
                f"(load {current_load}, threshold {threshold})"
            )
            return FeasibilityResult(
                feasible=True,
                reason_code=FeasibilityReason.ADMITTED,
                reason="slot available",
                scheduled_prep_time=required_start,
                estimated_wait_minutes=0,
                current_load=current_load,
                effective_capacity=effective_capacity,
                rush_intensity=rush_intensity,
            )

        suggested = self.slot_finder.find_next_available_slot(
            pickup_time,
            total_item_count,
            active_orders,
            effective_capacity,
        )
        logger.debug(
            f"Slot {pickup_time.isoformat()} busy ({current_load}/{effective_capacity}); "
            f"suggesting {suggested.start.isoformat()}"
        )
        return FeasibilityResult(
            feasible=False,
            reason_code=FeasibilityReason.SLOT_BUSY,
            reason=f"slot busy ({current_load}/{effective_capacity})",
            suggested_slot=suggested,
            current_load=current_load,
            effective_capacity=effective_capacity,
            rush_intensity=rush_intensity,
        )
