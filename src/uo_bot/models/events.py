"""Calendar event model and event group enum."""

from datetime import datetime
from enum import Enum

from pydantic import AwareDatetime, BaseModel


class EventGroup(str, Enum):
    """Community groups that calendar events belong to."""

    UOA3 = "UOA3"  # ArmA 3
    UOAF = "UOAF"  # Falcon BMS
    UOTC = "UOTC"  # Training courses
    OTHER = "OTHER"


class EventRecord(BaseModel):
    """One calendar entry pulled from the feed."""

    title: str
    date: AwareDatetime  # Event start
    group: EventGroup = EventGroup.OTHER
    link: str | None = None
    description: str = ""
    reminders_sent: dict[str, bool] = {}  # Reminder label -> already fired

    @property
    def key(self) -> tuple[str, datetime]:
        """Stable identity of the entry across feed pulls."""
        return (self.title, self.date)
