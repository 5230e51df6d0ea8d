"""Request statistics and diagnostic event log."""

from .events import EventLog
from .stats import StatsRecorder

__all__ = [
    "EventLog",
    "StatsRecorder",
]
