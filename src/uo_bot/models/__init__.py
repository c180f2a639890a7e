"""Data models and enums for the notification engine."""

from uo_bot.models.events import EventGroup, EventRecord
from uo_bot.models.server import NO_MISSION, ServerStatus

__all__ = [
    "EventGroup",
    "EventRecord",
    "NO_MISSION",
    "ServerStatus",
]
