"""Tests for Bot wiring: routines, calendar refresh, and command dispatch."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from uo_bot.bot import Bot
from uo_bot.commands import SHUTDOWN_OUTPUT, CommandMessage
from uo_bot.config import Settings
from uo_bot.feeds.calendar import CalendarFeed
from uo_bot.models.server import ServerStatus

FEED_URL = "http://forums.example.com/rss/calendar/"


def _feed_xml(title: str, start: datetime) -> str:
    pub_date = start.strftime("%a, %d %b %Y %H:%M:%S +0000")
    return (
        '<rss version="2.0"><channel>'
        f"<item><title>{title}</title><pubDate>{pub_date}</pubDate></item>"
        "</channel></rss>"
    )


def _calendar(body: str, status: int = 200) -> CalendarFeed:
    transport = httpx.MockTransport(lambda request: httpx.Response(status, text=body))
    return CalendarFeed(FEED_URL, transport=transport)


def _make_bot(settings: Settings, calendar: CalendarFeed | None = None) -> Bot:
    return Bot(
        settings,
        deliver=AsyncMock(),
        fetch_status=AsyncMock(return_value=ServerStatus(mission_name="CO40 Bravo", players="30/64")),
        calendar=calendar or _calendar(_feed_xml("UOA3: Ops", datetime(2024, 3, 3, 19, tzinfo=timezone.utc))),
        on_shutdown=MagicMock(),
    )


@pytest.fixture
def mock_slack():
    with (
        patch("uo_bot.slack.notifier.send_message", new_callable=AsyncMock) as send,
        patch("uo_bot.slack.notifier.get_user_name", new_callable=AsyncMock, return_value="jane") as name,
    ):
        yield send, name


# -- Routines --


async def test_refresh_calendar_feeds_reminder_engine(settings: Settings):
    bot = _make_bot(settings)

    await bot.refresh_calendar()

    assert [e.title for e in bot.reminders.events] == ["UOA3: Ops"]


async def test_notify_of_events_sends_due_reminder(settings: Settings):
    start = datetime.now(timezone.utc).replace(microsecond=0) + timedelta(hours=1, minutes=30)
    bot = _make_bot(settings, _calendar(_feed_xml("UOA3: Ops", start)))
    await bot.refresh_calendar()

    await bot.notify_of_events()
    await bot.notify_of_events()

    assert bot.reminders._deliver.await_count == 1


async def test_notify_of_new_mission_uses_configured_url(settings: Settings):
    bot = _make_bot(settings)

    await bot.notify_of_new_mission()

    bot.fetch_server_status.assert_awaited_once_with(settings.server_status_url)
    assert bot.mission.current.mission_name == "CO40 Bravo"


async def test_start_survives_failed_initial_pull(settings: Settings):
    """A broken feed at startup is logged; routines still start."""
    bot = _make_bot(settings, _calendar("unavailable", status=404))

    await bot.start()

    assert set(bot.scheduler.routines) == {"calendar", "reminders", "mission"}
    await bot.stop()
    assert all(r.cancelled for r in bot.scheduler.routines.values())


async def test_start_uses_configured_intervals(settings: Settings):
    settings.reminder_interval = 45
    bot = _make_bot(settings)

    await bot.start()

    assert bot.scheduler.routines["reminders"].interval == 45
    assert bot.scheduler.routines["mission"].interval == settings.mission_interval
    await bot.stop()


# -- Commands --


def test_default_commands_registered(settings: Settings):
    bot = _make_bot(settings)
    assert set(bot.commands) == {"?", "help", "ratio", "primary", "shutdown", "join_group", "leave_group"}


async def test_handle_command_runs_action_and_logs(settings: Settings, mock_slack):
    send, _ = mock_slack
    bot = _make_bot(settings)
    action = AsyncMock(return_value="did it")
    bot.add_command("ping", action)

    output = await bot.handle_command(CommandMessage("U1", "C_MAIN", "!ping a b"))

    assert output == "did it"
    action.assert_awaited_once()
    assert action.await_args.args[2] == ["a", "b"]
    channel, text = send.await_args.args
    assert channel == "C_LOG"
    assert text.startswith('jane ran "!ping a b" at time ')
    assert text.endswith(': "did it"')


async def test_log_defuses_broadcast_mentions(settings: Settings, mock_slack):
    send, _ = mock_slack
    bot = _make_bot(settings)
    bot.add_command("ping", AsyncMock(return_value="ok"))

    await bot.handle_command(CommandMessage("U1", "C_MAIN", "!ping <!channel>"))

    assert "<!" not in send.await_args.args[1]


async def test_handle_unknown_command(settings: Settings, mock_slack):
    send, _ = mock_slack
    bot = _make_bot(settings)

    assert await bot.handle_command(CommandMessage("U1", "C_MAIN", "!nope")) is None
    send.assert_not_awaited()


async def test_handle_non_command(settings: Settings, mock_slack):
    bot = _make_bot(settings)
    assert await bot.handle_command(CommandMessage("U1", "C_MAIN", "hello")) is None


async def test_handle_command_failure_is_contained(settings: Settings, mock_slack):
    bot = _make_bot(settings)
    bot.add_command("boom", AsyncMock(side_effect=RuntimeError("kaboom")))

    assert await bot.handle_command(CommandMessage("U1", "C_MAIN", "!boom")) is None


async def test_shutdown_cancels_routines_and_exits(settings: Settings, mock_slack):
    bot = _make_bot(settings)
    bot.add_command("shutdown", AsyncMock(return_value=SHUTDOWN_OUTPUT))
    await bot.start()

    output = await bot.handle_command(CommandMessage("U_ADMIN", "C_MAIN", "!shutdown"))

    assert output == SHUTDOWN_OUTPUT
    assert all(r.cancelled for r in bot.scheduler.routines.values())
    bot._on_shutdown.assert_called_once()
    await bot.scheduler.wait_closed()


async def test_denied_shutdown_keeps_running(settings: Settings, mock_slack):
    bot = _make_bot(settings)
    bot.add_command("shutdown", AsyncMock(return_value="invalid user permissions"))
    await bot.start()

    await bot.handle_command(CommandMessage("U_REG", "C_MAIN", "!shutdown"))

    assert not any(r.cancelled for r in bot.scheduler.routines.values())
    bot._on_shutdown.assert_not_called()
    await bot.stop()
