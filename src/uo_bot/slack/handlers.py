"""Slack event dispatch: command messages and new member greetings."""

import logging
from typing import TYPE_CHECKING

from fastapi import BackgroundTasks
from fastapi.responses import JSONResponse

from uo_bot.commands import CommandMessage
from uo_bot.messages import welcome_message
from uo_bot.slack.notifier import send_direct_message

if TYPE_CHECKING:
    from uo_bot.bot import Bot

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "!"


def handle_slack_event(payload: dict, background_tasks: BackgroundTasks, bot: "Bot") -> JSONResponse:
    """Dispatch a Slack event based on its type.

    - url_verification: return the challenge token
    - event_callback: process the contained event
    - anything else: acknowledge with 200
    """
    if payload.get("type") == "url_verification":
        return JSONResponse({"challenge": payload["challenge"]})

    if payload.get("type") == "event_callback":
        event = payload.get("event", {})
        if event.get("type") == "team_join":
            handle_team_join(event, background_tasks)
        else:
            handle_message_event(event, background_tasks, bot)

    return JSONResponse({"ok": True})


def handle_message_event(event: dict, background_tasks: BackgroundTasks, bot: "Bot") -> None:
    """Apply message filters and dispatch commands to the background.

    Filters, in order:
    1. Not a message event -> skip
    2. Has subtype (edits, bot_message, joins, etc.) -> skip
    3. Has bot_id -> skip
    4. Thread reply -> skip
    5. Direct message, or no user/channel -> skip
    6. Not a command (no "!" prefix) -> skip
    """
    if event.get("type") != "message":
        return

    if event.get("subtype") is not None:
        return

    if event.get("bot_id"):
        return

    if event.get("thread_ts"):
        return

    # Commands only run in channels
    if event.get("channel_type") == "im":
        return

    user_id = event.get("user")
    channel_id = event.get("channel")
    if not user_id or not channel_id:
        return

    text = (event.get("text") or "").strip()
    if not text.startswith(COMMAND_PREFIX) or len(text) == 1:
        return

    logger.info(
        "Dispatching command %s from user %s in channel %s",
        text.split()[0],
        user_id,
        channel_id,
    )

    background_tasks.add_task(
        bot.handle_command,
        CommandMessage(
            user_id=user_id,
            channel_id=channel_id,
            text=text,
            timestamp=event.get("ts", ""),
        ),
    )


def handle_team_join(event: dict, background_tasks: BackgroundTasks) -> None:
    """Queue a welcome DM for a new workspace member."""
    user = event.get("user") or {}
    user_id = user.get("id")
    if not user_id or user.get("is_bot"):
        return
    profile = user.get("profile") or {}
    username = profile.get("display_name") or user.get("real_name") or user.get("name") or "there"
    background_tasks.add_task(welcome_new_member, user_id, username)


async def welcome_new_member(user_id: str, username: str) -> None:
    text, blocks = welcome_message(username)
    await send_direct_message(user_id, text, blocks)
    logger.info("Welcomed new member %s", user_id)
