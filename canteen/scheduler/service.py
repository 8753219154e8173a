"""
Kitchen Scheduler Facade

Single entry point the host order workflow talks to. Wires the rush
model, load calculator, slot finder, slot generator, feasibility
checker and queue-delay predictor together from ``Settings``.

Every method is a deterministic function of its arguments; the facade
only holds immutable configuration and is safe to share across
request-handling threads.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from canteen.core.config import Settings
from canteen.schemas import (
    ActiveOrder,
    FeasibilityResult,
    OrderItemSnapshot,
    TimeSlotOption,
)
from canteen.scheduler.feasibility import FeasibilityChecker
from canteen.scheduler.load import CapacityLoadCalculator
from canteen.scheduler.queue_delay import QueueDelayPredictor
from canteen.scheduler.rush import RushIntensityModel
from canteen.scheduler.slots import SlotFinder, TimeSlotGenerator

logger = logging.getLogger(__name__)


class KitchenScheduler:
    """
    Kitchen-capacity admission scheduler.

    Example:
        >>> scheduler = KitchenScheduler(Settings())
        >>> result = scheduler.check_feasibility(
        ...     pickup_time=now + timedelta(minutes=20),
        ...     items=[OrderItemSnapshot(quantity=1, prep_time_minutes=10)],
        ...     active_orders=[],
        ...     kitchen_capacity=5,
        ...     now=now,
        ... )
        >>> result.feasible
        True
    """

    def __init__(self, settings: Settings):
        self.settings = settings

        self.rush_model = RushIntensityModel(
            settings.rush_windows,
            baseline=settings.baseline_rush_intensity,
        )
        self.calculator = CapacityLoadCalculator(
            default_prep_time_minutes=settings.default_prep_time_minutes,
        )
        self.slot_finder = SlotFinder(
            self.calculator,
            step_minutes=settings.slot_search_step_minutes,
            attempts=settings.slot_search_attempts,
            lookback_minutes=settings.slot_lookback_minutes,
            slot_minutes=settings.suggested_slot_minutes,
            fallback_offset_minutes=settings.fallback_offset_minutes,
        )
        self.checker = FeasibilityChecker(
            self.rush_model,
            self.calculator,
            self.slot_finder,
            buffer_minutes=settings.buffer_minutes,
            rush_capacity_penalty=settings.rush_capacity_penalty,
            min_admission_threshold=settings.min_admission_threshold,
            suggested_slot_minutes=settings.suggested_slot_minutes,
        )
        self.slot_generator = TimeSlotGenerator(
            self.rush_model,
            min_prep_buffer_minutes=settings.slot_min_prep_buffer_minutes,
        )
        self.queue_predictor = QueueDelayPredictor(
            self.calculator,
            default_kitchen_capacity=settings.default_kitchen_capacity,
        )

    def check_feasibility(
        self,
        pickup_time: datetime,
        items: Sequence[OrderItemSnapshot],
        active_orders: Sequence[ActiveOrder],
        kitchen_capacity: Optional[int],
        now: datetime,
    ) -> FeasibilityResult:
        """Admission check; see ``FeasibilityChecker.check_feasibility``."""
        if kitchen_capacity is None:
            kitchen_capacity = self.settings.default_kitchen_capacity
        return self.checker.check_feasibility(
            pickup_time,
            list(items),
            list(active_orders),
            kitchen_capacity,
            now,
        )

    def list_time_slots(
        self,
        now: datetime,
        horizon_hours: Optional[int] = None,
        interval_minutes: Optional[int] = None,
    ) -> list[TimeSlotOption]:
        """Browsable slot list, defaulting to the configured horizon and interval."""
        return self.slot_generator.generate_slots(
            now,
            horizon_hours=self.settings.slot_horizon_hours if horizon_hours is None else horizon_hours,
            interval_minutes=interval_minutes or self.settings.slot_interval_minutes,
        )

    def predict_queue_delay(
        self,
        active_orders: Iterable[ActiveOrder],
        canteen_id,
        kitchen_capacity: Optional[int] = None,
    ) -> int:
        """Advisory wait estimate in minutes."""
        return self.queue_predictor.predict_delay(active_orders, canteen_id, kitchen_capacity)
