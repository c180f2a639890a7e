"""Mission change detector for the primary game server.

Announces a new mission exactly once: when the scraped mission differs from
the last announced one, is not the "no mission" sentinel, and enough players
are on to make it worth pinging the channel.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from uo_bot.messages import server_message
from uo_bot.models.server import ServerStatus
from uo_bot.reminders import Deliver
from uo_bot.routing import MISSION_TOPIC, NotificationRouter

logger = logging.getLogger(__name__)

FetchStatus = Callable[[str], Awaitable[ServerStatus | None]]

NEW_MISSION_HEADER = "_*NEW MISSION \U0001f389*_"


class MissionDetector:
    """Owns the retained server status (None until the first announcement)."""

    def __init__(
        self,
        fetch_status: FetchStatus,
        router: NotificationRouter,
        deliver: Deliver,
        min_player_alert: int,
        fetch_timeout: float = 30.0,
        send_timeout: float = 30.0,
    ) -> None:
        self._fetch_status = fetch_status
        self._router = router
        self._deliver = deliver
        self.min_player_alert = min_player_alert
        self._fetch_timeout = fetch_timeout
        self._send_timeout = send_timeout
        self.current: ServerStatus | None = None

    async def fetch(self, url: str) -> ServerStatus:
        """Fetch the status, substituting the sentinel on failure or empty result."""
        try:
            async with asyncio.timeout(self._fetch_timeout):
                status = await self._fetch_status(url)
        except Exception as exc:
            logger.warning("Server status fetch failed: %s", exc, extra={"url": url})
            status = None
        return status if status is not None else ServerStatus.sentinel()

    def should_notify(self, status: ServerStatus) -> bool:
        if status.is_sentinel:
            return False
        if self.current is not None and status.mission_name == self.current.mission_name:
            return False
        return status.player_count >= self.min_player_alert

    async def check_mission(self, url: str) -> bool:
        """Run one detection tick. Returns True if an announcement was attempted."""
        status = await self.fetch(url)
        if not self.should_notify(status):
            return False

        self.current = status
        audience = self._router.resolve_audience(MISSION_TOPIC)
        text, blocks = server_message(status)
        header = {"type": "section", "text": {"type": "mrkdwn", "text": NEW_MISSION_HEADER}}
        logger.info(
            "New mission detected: %s",
            status.mission_name,
            extra={"players": status.player_count, "island": status.island},
        )
        try:
            async with asyncio.timeout(self._send_timeout):
                await self._deliver(audience, f"{NEW_MISSION_HEADER} {text}", [header, *blocks])
        except Exception as exc:
            logger.error(
                "New mission announcement failed: %s",
                exc,
                exc_info=True,
                extra={"channel": audience.channel_id},
            )
        return True
