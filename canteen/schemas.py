"""
Pydantic Schemas for the Kitchen Scheduler

Immutable value objects exchanged between the host order workflow and
the scheduler:
- Order item and active-order snapshots (inputs)
- Feasibility results and slot descriptors (outputs)
- Vendor queue and canteen load views (host boundary)

Author: Khalil_Bannouri
Version: 1.0.0
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# ENUMS
# =============================================================================

class OrderStatus(str, Enum):
    """Order status workflow."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    COLLECTED = "collected"
    CANCELLED = "cancelled"


class FeasibilityReason(str, Enum):
    """Machine-checkable outcome of an admission check."""
    ADMITTED = "admitted"
    TOO_SOON = "too_soon"
    SLOT_BUSY = "slot_busy"


# =============================================================================
# INPUT SNAPSHOTS
# =============================================================================

class OrderItemSnapshot(BaseModel):
    """
    Item of an order, frozen at order-creation time.

    ``prep_time_minutes`` may be absent; the scheduler substitutes the
    configured default (10 minutes) for a missing or zero value.
    """
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(None, max_length=100, examples=["Masala Dosa"])
    quantity: int = Field(default=1, ge=1, examples=[2])
    prep_time_minutes: Optional[int] = Field(None, ge=0, examples=[10])

    @field_validator("quantity", mode="before")
    @classmethod
    def default_quantity(cls, v):
        return 1 if v is None else v


class TimeWindow(BaseModel):
    """Half-open interval ``[start, end)``."""
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def check_order(self) -> "TimeWindow":
        if self.start >= self.end:
            raise ValueError("Time window start must be before its end")
        return self

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60


class ActiveOrder(BaseModel):
    """
    Snapshot of an order already committed to a canteen's kitchen.

    The order occupies the kitchen over ``[scheduled_prep_time,
    pickup_window.end)``.
    """
    model_config = ConfigDict(frozen=True)

    order_id: Optional[str] = None
    canteen_id: str
    items: tuple[OrderItemSnapshot, ...] = ()
    scheduled_prep_time: datetime
    pickup_window: TimeWindow
    status: OrderStatus = OrderStatus.CONFIRMED

    @field_validator("canteen_id", mode="before")
    @classmethod
    def coerce_canteen_id(cls, v):
        # Hosts hand us database ids of various types
        return v if isinstance(v, str) else str(v)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)


class RushWindow(BaseModel):
    """Time-of-day window, in fractional hours, with its rush intensity."""
    model_config = ConfigDict(frozen=True)

    start: float = Field(..., ge=0, le=24, examples=[12])
    end: float = Field(..., ge=0, le=24, examples=[13.5])
    intensity: float = Field(..., ge=0, le=1, examples=[1.0])

    @model_validator(mode="after")
    def check_bounds(self) -> "RushWindow":
        if self.start >= self.end:
            raise ValueError("Rush window start must be before its end")
        return self

    def contains(self, hour_value: float) -> bool:
        return self.start <= hour_value < self.end


# =============================================================================
# RESULTS
# =============================================================================

class FeasibilityResult(BaseModel):
    """
    Outcome of an admission check.

    Admitted results carry ``scheduled_prep_time`` and
    ``estimated_wait_minutes``; rejected results carry ``suggested_slot``.
    Load figures are absent when the request was rejected for timing alone.
    """
    model_config = ConfigDict(frozen=True)

    feasible: bool
    reason_code: FeasibilityReason
    reason: str
    scheduled_prep_time: Optional[datetime] = None
    estimated_wait_minutes: Optional[int] = None
    suggested_slot: Optional[TimeWindow] = None
    current_load: Optional[int] = None
    effective_capacity: Optional[int] = None
    rush_intensity: Optional[float] = None


class TimeSlotOption(BaseModel):
    """A pickup slot offered to a slot-picker UI."""
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    label: str = Field(..., examples=["12:30 PM - 12:40 PM"])
    rush_intensity: float


class AdmissionDecision(BaseModel):
    """Feasibility result plus the order persisted when it was admitted."""
    model_config = ConfigDict(frozen=True)

    result: FeasibilityResult
    order: Optional[ActiveOrder] = None

    @property
    def admitted(self) -> bool:
        return self.order is not None


class KitchenQueueEntry(BaseModel):
    """Vendor-facing view of an order waiting in the kitchen."""
    model_config = ConfigDict(frozen=True)

    order: ActiveOrder
    minutes_until_prep: int
    is_urgent: bool


class CanteenLoadSummary(BaseModel):
    """Current load of a canteen, for canteen listings."""
    model_config = ConfigDict(frozen=True)

    canteen_id: str
    active_order_count: int
    current_load: int
    max_capacity: int
    queue_delay_minutes: int
