"""
                        Services Module

Host-boundary services around the kitchen scheduler.

Services:
    - admission: per-canteen serialized check-then-commit of new orders
    - board_export: lock-protected Excel boards for vendor dashboards
"""

from canteen.services.board_export import BoardExporter

__all__ = ["BoardExporter"]
