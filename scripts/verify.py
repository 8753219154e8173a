"""
Board Verification Script

Verifies the kitchen boards exported by ``scripts/simulate.py --export``.
Run from project root: python scripts/verify.py [canteen_id]

Author: Khalil_Bannouri
Version: 1.0.0
"""

import os
import sys
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pandas as pd

from canteen.services import BoardExporter


def verify_boards(canteen_id: str = "main-canteen") -> bool:
    """Verify exported slot and queue boards for a canteen."""
    exporter = BoardExporter()
    slots_file = exporter.board_path(canteen_id, "slots")
    queue_file = exporter.board_path(canteen_id, "queue")

    print("=" * 60)
    print("🔍 KITCHEN BOARD VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"📄 Slots: {slots_file}")
    print(f"📄 Queue: {queue_file}")
    print("=" * 60)

    if not slots_file.exists() or not queue_file.exists():
        print("\n❌ Board files not found!")
        print("   Run the simulation first: python scripts/simulate.py --export")
        return False

    try:
        slots = pd.read_excel(slots_file, engine="openpyxl")
        queue = pd.read_excel(queue_file, engine="openpyxl")
        print(f"\n✅ Boards loaded successfully!")
    except (OSError, ValueError) as e:
        print(f"\n❌ Could not read boards: {e}")
        return False

    ok = True

    # Slot board
    print(f"\n📊 SLOTS: {len(slots)}")
    missing = [c for c in BoardExporter.SLOT_COLUMNS if c not in slots.columns]
    if missing:
        print(f"⚠️ Missing Columns: {missing}")
        ok = False
    elif len(slots) > 0:
        starts = pd.to_datetime(slots["slot_start"])
        ends = pd.to_datetime(slots["slot_end"])
        if starts.is_monotonic_increasing and (starts.iloc[1:].values >= ends.iloc[:-1].values).all():
            print("✅ Slots strictly increasing and non-overlapping")
        else:
            print("⚠️ Slots overlap or are out of order!")
            ok = False
        print(f"   Peak rush intensity: {slots['rush_intensity'].max():.1f}")

    # Queue board
    print(f"\n🍳 QUEUE: {len(queue)} orders")
    missing = [c for c in BoardExporter.QUEUE_COLUMNS if c not in queue.columns]
    if missing:
        print(f"⚠️ Missing Columns: {missing}")
        ok = False
    elif len(queue) > 0:
        duplicates = queue["order_id"].duplicated().sum()
        if duplicates > 0:
            print(f"⚠️ {duplicates} duplicate order IDs found!")
            ok = False
        else:
            print("✅ No duplicate order IDs")
        print(f"   Items in kitchen: {queue['item_count'].sum()}")
        print(f"   Urgent orders: {int(queue['is_urgent'].sum())}")
        cols = ["order_id", "status", "item_count", "minutes_until_prep"]
        print("-" * 60)
        print(queue[cols].head(5).to_string(index=False))

    print("\n" + "=" * 60)
    print("✅ VERIFICATION COMPLETE" if ok else "⚠️ VERIFICATION FOUND ISSUES")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    verify_boards(*sys.argv[1:2])
