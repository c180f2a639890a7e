"""Maps notification topics to concrete Slack destinations."""

from dataclasses import dataclass
from typing import Literal

from uo_bot.config import Settings
from uo_bot.models.events import EventGroup

MISSION_TOPIC = "mission"

Topic = EventGroup | Literal["mission"] | str


@dataclass(frozen=True)
class Audience:
    """A resolved destination: channel id plus an optional role (user group) to mention."""

    channel_id: str
    role: str | None = None


class NotificationRouter:
    """Fixed topic -> audience table built from settings.

    Total over every EventGroup plus the mission topic; anything else falls
    back to the main channel without a mention.
    """

    def __init__(self, settings: Settings) -> None:
        self._table: dict[str, Audience] = {
            EventGroup.UOA3.value: Audience(settings.arma_channel, settings.arma_player_role or None),
            EventGroup.UOAF.value: Audience(settings.bms_channel, settings.bms_player_role or None),
            EventGroup.UOTC.value: Audience(settings.arma_channel),
            MISSION_TOPIC: Audience(settings.arma_channel),
        }
        self._default = Audience(settings.main_channel)

    def resolve_audience(self, topic: Topic) -> Audience:
        key = topic.value if isinstance(topic, EventGroup) else str(topic)
        return self._table.get(key, self._default)
