"""
Admission Rush Simulation Script

Fires many concurrent orders at one canteen to check that the
per-canteen admission lock keeps the kitchen under its admission
threshold.
Run from project root: python scripts/simulate.py

Author: Khalil_Bannouri
Version: 1.0.0
"""

import asyncio
import sys
import os
import random
import time
import argparse
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Any

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from canteen.core.config import get_settings, setup_logging
from canteen.schemas import OrderItemSnapshot, TimeWindow
from canteen.scheduler import get_kitchen_scheduler
from canteen.services import BoardExporter
from canteen.services.admission import (
    ADMISSION_STATUSES,
    AdmissionCoordinator,
    InMemoryOrderStore,
)

# Configuration
CANTEEN_ID = "main-canteen"
TOTAL_ORDERS = 50

# Sample menu with prep times in minutes
MENU_ITEMS = [
    {"name": "Masala Dosa", "prep_time_minutes": 12},
    {"name": "Veg Sandwich", "prep_time_minutes": 6},
    {"name": "Paneer Roll", "prep_time_minutes": 10},
    {"name": "Cold Coffee", "prep_time_minutes": 4},
    {"name": "Fried Rice", "prep_time_minutes": 15},
    {"name": "Samosa", "prep_time_minutes": None},
]


def generate_random_items() -> list[OrderItemSnapshot]:
    """Generate random order items."""
    return [
        OrderItemSnapshot(quantity=random.randint(1, 2), **random.choice(MENU_ITEMS))
        for _ in range(random.randint(1, 2))
    ]


async def send_order(
    coordinator: AdmissionCoordinator,
    order_num: int,
    capacity: int,
    pickup_window: TimeWindow,
    now: datetime,
) -> dict[str, Any]:
    """Place one order from a worker thread."""
    items = generate_random_items()
    start_time = time.time()

    decision = await asyncio.to_thread(
        coordinator.place_order,
        CANTEEN_ID,
        capacity,
        items,
        pickup_window,
        now,
    )
    elapsed = round(time.time() - start_time, 3)

    return {
        "order_num": order_num,
        "admitted": decision.admitted,
        "items": sum(item.quantity for item in items),
        "reason": decision.result.reason,
        "suggested": decision.result.suggested_slot,
        "time": elapsed,
    }


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(
    num_orders: int = TOTAL_ORDERS,
    capacity: int = 5,
    pickup_in_minutes: int = 30,
    export: bool = False,
) -> dict[str, Any]:
    """
    Run the admission rush simulation.

    Args:
        num_orders: Number of concurrent orders
        capacity: Kitchen capacity of the canteen
        pickup_in_minutes: Requested pickup, minutes from now
        export: Write slot and queue boards to the data directory
    """
    now = datetime.now(timezone.utc)
    pickup = now + timedelta(minutes=pickup_in_minutes)
    pickup_window = TimeWindow(start=pickup, end=pickup + timedelta(minutes=10))

    store = InMemoryOrderStore()
    coordinator = AdmissionCoordinator(store, lock_dir=tempfile.mkdtemp(prefix="canteen-locks-"))
    scheduler = get_kitchen_scheduler()
    settings = get_settings()

    print("=" * 70)
    print("🔥 ADMISSION RUSH SIMULATION")
    print("=" * 70)
    print(f"🚀 {settings.app_name} v{settings.app_version}")
    print(f"📋 Total Orders: {num_orders}")
    print(f"🍳 Kitchen Capacity: {capacity}")
    print(f"⏰ Pickup: {pickup_window.start.strftime('%H:%M')} UTC")
    print(f"🌡️  Rush Intensity: {scheduler.rush_model.intensity_at(pickup)}")
    print("=" * 70)

    start_time = time.time()
    tasks = [
        send_order(coordinator, i + 1, capacity, pickup_window, now)
        for i in range(num_orders)
    ]
    results = await asyncio.gather(*tasks)
    total_time = round(time.time() - start_time, 2)

    admitted = [r for r in results if r["admitted"]]
    rejected = [r for r in results if not r["admitted"]]

    # Every admitted order shares the pickup window, so all of them overlap
    active = store.list_orders(CANTEEN_ID, ADMISSION_STATUSES)
    committed_items = scheduler.calculator.total_quantity(active)
    effective = scheduler.checker.effective_capacity(
        capacity, scheduler.rush_model.intensity_at(pickup)
    )
    threshold = max(effective, settings.min_admission_threshold)

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Admitted Orders: {len(admitted)}/{num_orders}")
    print(f"❌ Rejected Orders: {len(rejected)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")
    print(f"\n🍳 Committed Items: {committed_items} (threshold {threshold})")

    if committed_items <= threshold:
        print("✅ Kitchen never overshot its admission threshold")
    else:
        print("⚠️ Kitchen overshot its admission threshold!")

    if rejected:
        print(f"\n⚠️  Rejected Order Details (showing first 5):")
        for r in rejected[:5]:
            slot = r["suggested"]
            print(
                f"   Order #{r['order_num']} ({r['items']} items): {r['reason']} "
                f"→ try {slot.start.strftime('%H:%M')}"
            )

    if export:
        exporter = BoardExporter()
        slots = scheduler.list_time_slots(now)
        queue = coordinator.kitchen_queue(CANTEEN_ID, now)
        for outcome in (
            exporter.export_time_slots(CANTEEN_ID, slots),
            exporter.export_kitchen_queue(CANTEEN_ID, queue),
        ):
            print(f"\n📄 {outcome['message']}: {outcome['path']}")

    print("\n" + "=" * 70)

    return {
        "total": num_orders,
        "admitted": len(admitted),
        "rejected": len(rejected),
        "committed_items": committed_items,
        "threshold": threshold,
        "total_time": total_time,
        "results": results,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Admission Rush Simulation")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--capacity", type=int, default=5, help="Kitchen capacity")
    parser.add_argument("--pickup-in", type=int, default=30, help="Pickup time, minutes from now")
    parser.add_argument("--export", action="store_true", help="Export slot and queue boards")
    args = parser.parse_args()

    setup_logging()
    summary = asyncio.run(run_simulation(
        num_orders=args.orders,
        capacity=args.capacity,
        pickup_in_minutes=args.pickup_in,
        export=args.export,
    ))
    sys.exit(0 if summary["committed_items"] <= summary["threshold"] else 1)
