"""
Pickup Slot Search and Slot Listing

- SlotFinder: walks forward from a rejected pickup time to the next
  slot with spare capacity.
- TimeSlotGenerator: builds the browsable list of upcoming slots for
  slot-picker UIs.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Sequence

from canteen.schemas import ActiveOrder, TimeSlotOption, TimeWindow
from canteen.scheduler.load import CapacityLoadCalculator
from canteen.scheduler.rush import RushIntensityModel

logger = logging.getLogger(__name__)


class SlotFinder:
    """
    Forward search for the next open pickup slot.

    Candidates are ``requested + k * step`` for ``k = 1..attempts``. A
    candidate ``t`` is open when the load over ``[t - lookback, t)`` plus
    the new order's items fits ``capacity``. The capacity is taken as
    given; rush intensity is not re-evaluated per candidate.
    """

    def __init__(
        self,
        calculator: CapacityLoadCalculator,
        step_minutes: int = 10,
        attempts: int = 12,
        lookback_minutes: int = 15,
        slot_minutes: int = 10,
        fallback_offset_minutes: int = 120,
    ):
        self.calculator = calculator
        self.step = timedelta(minutes=step_minutes)
        self.attempts = attempts
        self.lookback = timedelta(minutes=lookback_minutes)
        self.slot_length = timedelta(minutes=slot_minutes)
        self.fallback_offset = timedelta(minutes=fallback_offset_minutes)

    def load_before(self, orders: Sequence[ActiveOrder], time: datetime) -> int:
        """Items in the kitchen during the lookback window ending at ``time``."""
        window = TimeWindow(start=time - self.lookback, end=time)
        return self.calculator.total_quantity(
            self.calculator.orders_in_window(orders, window)
        )

    def find_next_available_slot(
        self,
        requested_time: datetime,
        item_count: int,
        active_orders: Sequence[ActiveOrder],
        capacity: int,
    ) -> TimeWindow:
        """
        Next slot where ``item_count`` more items fit under ``capacity``.

        Always returns a window: when the whole horizon is full the
        fallback ``[requested + offset, requested + offset + slot)`` is
        returned without checking it.
        """
        candidate = requested_time
        for _ in range(self.attempts):
            candidate = candidate + self.step
            load = self.load_before(active_orders, candidate)
            if load + item_count <= capacity:
                return TimeWindow(start=candidate, end=candidate + self.slot_length)

        fallback_start = requested_time + self.fallback_offset
        logger.debug(
            f"No open slot within {self.attempts} steps of {requested_time.isoformat()}, "
            f"falling back to {fallback_start.isoformat()}"
        )
        return TimeWindow(start=fallback_start, end=fallback_start + self.slot_length)


class TimeSlotGenerator:
    """Upcoming pickup slots annotated with rush intensity."""

    LABEL_FORMAT = "%I:%M %p"

    def __init__(
        self,
        rush_model: RushIntensityModel,
        min_prep_buffer_minutes: int = 15,
    ):
        self.rush_model = rush_model
        self.min_prep_buffer = timedelta(minutes=min_prep_buffer_minutes)

    @staticmethod
    def round_up(now: datetime, interval: timedelta) -> datetime:
        """Round ``now`` up to the next ``interval`` boundary of its day."""
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        steps = -(-(now - midnight) // interval)
        return midnight + steps * interval

    @classmethod
    def label_for(cls, start: datetime, end: datetime) -> str:
        return f"{start.strftime(cls.LABEL_FORMAT)} - {end.strftime(cls.LABEL_FORMAT)}"

    def generate_slots(
        self,
        now: datetime,
        horizon_hours: int = 4,
        interval_minutes: int = 10,
    ) -> list[TimeSlotOption]:
        """
        Consecutive, non-overlapping slots covering ``horizon_hours``.

        The first slot starts at ``now`` rounded up to the interval plus
        the minimum prep buffer.
        """
        interval = timedelta(minutes=interval_minutes)
        first_start = self.round_up(now, interval) + self.min_prep_buffer
        count = math.ceil(horizon_hours * 60 / interval_minutes)

        slots = []
        for i in range(count):
            start = first_start + i * interval
            end = start + interval
            slots.append(TimeSlotOption(
                start=start,
                end=end,
                label=self.label_for(start, end),
                rush_intensity=self.rush_model.intensity_at(start),
            ))
        return slots
