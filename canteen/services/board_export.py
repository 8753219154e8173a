"""
Kitchen Board Exporter with Concurrency Control

Spreadsheet exports of advisory scheduling data for vendor dashboards:
- Upcoming pickup slots with their rush intensity
- The kitchen queue with time until prep and urgency flags

Each canteen board is a separate workbook, rewritten under a file lock
so concurrent exports never interleave.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional

import pandas as pd
from filelock import FileLock, Timeout

from canteen.core.config import get_settings
from canteen.schemas import KitchenQueueEntry, TimeSlotOption

logger = logging.getLogger(__name__)


class BoardExporter:
    """Lock-protected Excel boards per canteen."""

    SLOT_COLUMNS = [
        "canteen_id",
        "slot_start",
        "slot_end",
        "label",
        "rush_intensity",
        "exported_at",
    ]

    QUEUE_COLUMNS = [
        "order_id",
        "canteen_id",
        "status",
        "item_count",
        "scheduled_prep_time",
        "pickup_start",
        "pickup_end",
        "minutes_until_prep",
        "is_urgent",
        "exported_at",
    ]

    def __init__(self, data_dir: Optional[str] = None, lock_timeout: Optional[float] = None):
        settings = get_settings()
        self.data_dir = Path(data_dir or settings.data_directory)
        self.lock_timeout = settings.board_lock_timeout if lock_timeout is None else lock_timeout

    def _ensure_data_dir(self) -> None:
        """Create data directory if needed."""
        if not self.data_dir.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {self.data_dir}")

    def board_path(self, canteen_id: str, board: str) -> Path:
        safe_id = re.sub(r"[^A-Za-z0-9_.-]", "_", str(canteen_id))
        return self.data_dir / f"{board}-{safe_id}.xlsx"

    def _write_board(
        self,
        path: Path,
        rows: list[dict[str, Any]],
        columns: list[str],
        label: str,
    ) -> dict[str, Any]:
        """Replace the workbook at ``path`` with ``rows`` under its file lock."""
        self._ensure_data_dir()

        result = {
            "success": False,
            "message": "",
            "rows": len(rows),
            "path": str(path),
            "exported_at": None,
        }

        try:
            lock = FileLock(f"{path}.lock", timeout=self.lock_timeout)

            with lock:
                logger.debug(f"Lock acquired for {label}")

                export_time = datetime.now().isoformat()
                for row in rows:
                    row["exported_at"] = export_time

                df = pd.DataFrame(rows, columns=columns)
                df.to_excel(str(path), index=False, engine="openpyxl")

                logger.info(f"{label} exported ({len(rows)} rows)")

                result["success"] = True
                result["message"] = f"{label} exported"
                result["exported_at"] = export_time

            logger.debug(f"Lock released for {label}")

        except Timeout:
            result["message"] = f"Lock timeout ({self.lock_timeout}s)"
            logger.error(f"Lock timeout for {label}")

        except OSError as e:
            result["message"] = str(e)
            logger.exception(f"Error exporting {label}")

        return result

    def export_time_slots(
        self,
        canteen_id: str,
        slots: Iterable[TimeSlotOption],
    ) -> dict[str, Any]:
        """Export the slot-picker list of a canteen."""
        rows = [
            {
                "canteen_id": str(canteen_id),
                # Excel cannot hold timezone-aware datetimes
                "slot_start": slot.start.isoformat(),
                "slot_end": slot.end.isoformat(),
                "label": slot.label,
                "rush_intensity": slot.rush_intensity,
            }
            for slot in slots
        ]
        return self._write_board(
            self.board_path(canteen_id, "slots"),
            rows,
            self.SLOT_COLUMNS,
            f"Slot board for canteen {canteen_id}",
        )

    def export_kitchen_queue(
        self,
        canteen_id: str,
        entries: Iterable[KitchenQueueEntry],
    ) -> dict[str, Any]:
        """Export the vendor kitchen queue of a canteen."""
        rows = [
            {
                "order_id": entry.order.order_id,
                "canteen_id": entry.order.canteen_id,
                "status": entry.order.status.value,
                "item_count": entry.order.total_quantity,
                "scheduled_prep_time": entry.order.scheduled_prep_time.isoformat(),
                "pickup_start": entry.order.pickup_window.start.isoformat(),
                "pickup_end": entry.order.pickup_window.end.isoformat(),
                "minutes_until_prep": entry.minutes_until_prep,
                "is_urgent": entry.is_urgent,
            }
            for entry in entries
        ]
        return self._write_board(
            self.board_path(canteen_id, "queue"),
            rows,
            self.QUEUE_COLUMNS,
            f"Kitchen queue for canteen {canteen_id}",
        )

    @staticmethod
    def read_board(path: Path) -> list[dict[str, Any]]:
        """Rows of an exported board; empty when it does not exist yet."""
        path = Path(path)
        if not path.exists():
            return []
        df = pd.read_excel(path, engine="openpyxl")
        return df.to_dict("records")
