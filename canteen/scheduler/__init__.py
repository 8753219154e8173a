"""
Kitchen Scheduler Factory

Provides a single entry point for obtaining the scheduler configured
from application settings.

Usage:
    from canteen.scheduler import get_kitchen_scheduler

    scheduler = get_kitchen_scheduler()
    result = scheduler.check_feasibility(
        pickup_time=pickup,
        items=items,
        active_orders=snapshot,
        kitchen_capacity=canteen.kitchen_capacity,
        now=now,
    )

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
from functools import lru_cache

from canteen.core.config import get_settings
from canteen.scheduler.feasibility import FeasibilityChecker
from canteen.scheduler.load import CapacityLoadCalculator
from canteen.scheduler.queue_delay import QueueDelayPredictor
from canteen.scheduler.rush import RushIntensityModel
from canteen.scheduler.service import KitchenScheduler
from canteen.scheduler.slots import SlotFinder, TimeSlotGenerator

logger = logging.getLogger(__name__)


@lru_cache()
def get_kitchen_scheduler() -> KitchenScheduler:
    """
    Get the scheduler built from the cached settings.

    Returns:
        KitchenScheduler: Configured scheduler instance
    """
    settings = get_settings()
    logger.info(
        f"Kitchen scheduler: {len(settings.rush_windows)} rush windows, "
        f"buffer {settings.buffer_minutes} min"
    )
    return KitchenScheduler(settings)


def reset_kitchen_scheduler() -> None:
    """
    Clear the cached scheduler instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_kitchen_scheduler.cache_clear()
    logger.debug("Kitchen scheduler cache cleared")


__all__ = [
    "get_kitchen_scheduler",
    "reset_kitchen_scheduler",
    "KitchenScheduler",
    "FeasibilityChecker",
    "CapacityLoadCalculator",
    "QueueDelayPredictor",
    "RushIntensityModel",
    "SlotFinder",
    "TimeSlotGenerator",
]
