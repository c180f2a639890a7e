"""Chat command handlers.

Every handler takes ``(bot, message, args)`` and returns a short output string
that is written to the log channel.
"""

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from uo_bot.access import admin, regular
from uo_bot.config import get_settings
from uo_bot.feeds.http import FeedError
from uo_bot.messages import help_message, server_message
from uo_bot.slack.notifier import (
    LastMemberError,
    find_role,
    send_direct_message,
    send_message,
    set_role_membership,
)

if TYPE_CHECKING:
    from uo_bot.bot import Bot

logger = logging.getLogger(__name__)

SHUTDOWN_OUTPUT = "shutdown successful"

DESCRIPTIONS = {
    "help": "show this list (also `!?`)",
    "primary": "show the mission running on the primary server",
    "ratio <total> <a> <b>": "split players into two teams by ratio a:b",
    "join_group <name>": "join an open user group",
    "leave_group <name>": "leave an open user group",
    "shutdown": "stop the bot (admins only)",
}


@dataclass
class CommandMessage:
    """A command message received from Slack."""

    user_id: str
    channel_id: str
    text: str
    timestamp: str = ""


async def show_help(bot: "Bot", msg: CommandMessage, args: list[str]) -> str:
    await send_direct_message(msg.user_id, help_message(DESCRIPTIONS))
    return "help information sent"


async def primary(bot: "Bot", msg: CommandMessage, args: list[str]) -> str:
    try:
        status = await bot.fetch_server_status(get_settings().server_status_url)
    except FeedError as exc:
        logger.warning("!primary scrape failed: %s", exc)
        status = None

    if status is None:
        await send_message(msg.channel_id, "No mission information is available right now.")
        return "server information unavailable"

    text, blocks = server_message(status)
    await send_message(msg.channel_id, text, blocks)
    return "server information sent"


def split_ratio(total: int, a: int, b: int) -> tuple[int, int]:
    """Split ``total`` players a:b, rounding team one half-up and giving team two the rest."""
    first = math.floor(total * a / (a + b) + 0.5)
    return first, total - first


@regular
async def ratio(bot: "Bot", msg: CommandMessage, args: list[str]) -> str:
    try:
        total, a, b = (int(arg) for arg in args)
    except ValueError:
        return "invalid ratio arguments"
    if total < 0 or a <= 0 or b <= 0:
        return "invalid ratio arguments"

    first, second = split_ratio(total, a, b)
    await send_message(
        msg.channel_id,
        f"Ratio {a}:{b} for {total} players: *{first}* vs *{second}*",
    )
    return "ratio calculated"


async def _change_group(msg: CommandMessage, args: list[str], member: bool) -> str:
    name = " ".join(args).strip()
    allowed = {g.lower() for g in get_settings().allowed_group_names}
    if not name or name.lower() not in allowed:
        return "invalid group"

    role = await find_role(name)
    if role is None:
        return "group not found"

    try:
        changed = await set_role_membership(role, msg.user_id, member)
    except LastMemberError:
        return f"cannot leave group {role.name}: last member"
    if member:
        return f"joined group {role.name}" if changed else f"already in group {role.name}"
    return f"left group {role.name}" if changed else f"not in group {role.name}"


async def join_group(bot: "Bot", msg: CommandMessage, args: list[str]) -> str:
    return await _change_group(msg, args, member=True)


async def leave_group(bot: "Bot", msg: CommandMessage, args: list[str]) -> str:
    return await _change_group(msg, args, member=False)


@admin
async def shutdown(bot: "Bot", msg: CommandMessage, args: list[str]) -> str:
    return SHUTDOWN_OUTPUT


def register_commands(bot: "Bot") -> None:
    """Register the default command set on a bot."""
    bot.add_command("?", show_help)
    bot.add_command("help", show_help)
    bot.add_command("ratio", ratio)
    bot.add_command("primary", primary)
    bot.add_command("shutdown", shutdown)
    bot.add_command("join_group", join_group)
    bot.add_command("leave_group", leave_group)
