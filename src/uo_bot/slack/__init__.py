"""Slack transport: event ingress, signature verification, sends and lookups."""

from uo_bot.slack.client import get_slack_client, reset_client
from uo_bot.slack.notifier import (
    AudienceLookupError,
    LastMemberError,
    Role,
    deliver,
    find_channel,
    find_role,
    send_direct_message,
    send_message,
)

__all__ = [
    "AudienceLookupError",
    "LastMemberError",
    "Role",
    "deliver",
    "find_channel",
    "find_role",
    "get_slack_client",
    "reset_client",
    "send_direct_message",
    "send_message",
]
