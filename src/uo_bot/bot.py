"""Bot: wires feeds, the reminder engine, the mission detector and commands together.

The three periodic routines are:

- ``calendar``: pull the calendar feed and hand the events to the reminder engine
- ``reminders``: send reminders that have come due
- ``mission``: scrape the server page and announce new missions
"""

import logging
import os
import signal
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from slack_sdk.errors import SlackApiError

from uo_bot.commands import SHUTDOWN_OUTPUT, CommandMessage, register_commands
from uo_bot.config import Settings
from uo_bot.feeds.calendar import CalendarFeed
from uo_bot.feeds.http import FeedError
from uo_bot.feeds.server import scrape_server_page
from uo_bot.mission import FetchStatus, MissionDetector
from uo_bot.models.server import ServerStatus
from uo_bot.reminders import Deliver, ReminderEngine
from uo_bot.routing import NotificationRouter
from uo_bot.scheduler import Scheduler
from uo_bot.slack import notifier

logger = logging.getLogger(__name__)

BotAction = Callable[["Bot", CommandMessage, list[str]], Awaitable[str]]


def _request_exit() -> None:
    """Ask the server process to stop gracefully (runs the app lifespan shutdown)."""
    os.kill(os.getpid(), signal.SIGTERM)


class Bot:
    def __init__(
        self,
        settings: Settings,
        deliver: Deliver = notifier.deliver,
        fetch_status: FetchStatus | None = None,
        calendar: CalendarFeed | None = None,
        on_shutdown: Callable[[], None] = _request_exit,
    ) -> None:
        self.settings = settings
        self.router = NotificationRouter(settings)
        self.calendar = calendar or CalendarFeed(
            settings.calendar_feed_url, timeout_seconds=settings.http_timeout
        )
        self.fetch_server_status: FetchStatus = fetch_status or self._scrape
        self.reminders = ReminderEngine(
            settings.reminder_labels,
            self.router,
            deliver,
            send_timeout=settings.http_timeout * 2,
        )
        self.mission = MissionDetector(
            self.fetch_server_status,
            self.router,
            deliver,
            min_player_alert=settings.num_player_for_alert,
            fetch_timeout=settings.http_timeout * 4,
            send_timeout=settings.http_timeout * 2,
        )
        self.scheduler = Scheduler()
        self._commands: dict[str, BotAction] = {}
        self._on_shutdown = on_shutdown
        register_commands(self)

    async def _scrape(self, url: str) -> ServerStatus | None:
        return await scrape_server_page(url, timeout_seconds=self.settings.http_timeout)

    # -- Routines --

    async def refresh_calendar(self) -> None:
        """Pull the calendar feed and replace the reminder engine's events."""
        events = await self.calendar.pull()
        self.reminders.replace_events(events)

    async def notify_of_events(self) -> None:
        await self.reminders.check_reminders(datetime.now(timezone.utc))

    async def notify_of_new_mission(self) -> None:
        await self.mission.check_mission(self.settings.server_status_url)

    async def start(self) -> None:
        """Do the initial calendar pull and start all routines."""
        try:
            await self.refresh_calendar()
        except FeedError as exc:
            logger.error("START: initial calendar pull failed: %s", exc)

        self.scheduler.start("calendar", self.refresh_calendar, self.settings.calendar_refresh_interval)
        self.scheduler.start("reminders", self.notify_of_events, self.settings.reminder_interval)
        self.scheduler.start("mission", self.notify_of_new_mission, self.settings.mission_interval)

    def clear(self) -> None:
        """Cancel all routines."""
        self.scheduler.cancel_all()

    async def stop(self) -> None:
        """Cancel all routines and wait for in-flight invocations to finish."""
        self.clear()
        await self.scheduler.wait_closed()

    # -- Commands --

    def add_command(self, cmd: str, action: BotAction) -> None:
        self._commands[cmd] = action

    @property
    def commands(self) -> dict[str, BotAction]:
        return dict(self._commands)

    async def handle_command(self, msg: CommandMessage) -> str | None:
        """Run the command in ``msg`` and log it to the log channel.

        Returns the command output, or None when no command ran.
        """
        parts = msg.text.split()
        if not parts or not parts[0].startswith("!"):
            return None
        cmd, args = parts[0], parts[1:]
        action = self._commands.get(cmd[1:])
        if action is None:
            logger.error("No command function found for '%s'", cmd)
            return None

        try:
            output = await action(self, msg, args)
            await self._log(msg.user_id, " ".join(parts), output)
        except Exception as exc:
            logger.error("COMMAND (%s): %s", cmd, exc, exc_info=True)
            return None

        if cmd == "!shutdown" and output == SHUTDOWN_OUTPUT:
            logger.warning("Shutdown requested by %s", msg.user_id)
            self.clear()
            self._on_shutdown()
        return output

    async def _log(self, user_id: str, cmd: str, output: str) -> None:
        """Record a command run in the log channel with a UTC timestamp."""
        timestamp = datetime.now(timezone.utc).strftime("%H:%M:%S|%y-%m-%d")
        tag = await notifier.get_user_name(user_id)
        # Defuse group/broadcast mentions so logging a command never pings anyone
        cmd = cmd.replace("<!", "<")
        try:
            await notifier.send_message(
                self.settings.log_channel,
                f'{tag} ran "{cmd}" at time {timestamp}: "{output}"',
            )
        except SlackApiError:
            logger.warning("Failed to write command log for %s", tag, exc_info=True)
