"""
Utilities package for record-view.

Exports shared helpers for logging and profiling. Keep this package free of
view/catalog logic.
"""

from record_view.utils.logging import configure_logging, get_logger
from record_view.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
