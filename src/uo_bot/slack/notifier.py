"""Slack send and lookup primitives used by the notification engine and commands.

``deliver`` is the send primitive handed to the reminder engine and mission
detector. It raises on failure; catching and logging is the caller's job, so
each tick can isolate failures per notification.
"""

import logging
from dataclasses import dataclass, field

from slack_sdk.errors import SlackApiError

from uo_bot.routing import Audience
from uo_bot.slack.client import get_slack_client

logger = logging.getLogger(__name__)


class AudienceLookupError(LookupError):
    """A configured channel id does not resolve in the workspace."""


class LastMemberError(ValueError):
    """Removing the user would leave a user group empty, which Slack rejects."""


@dataclass
class Role:
    """A Slack user group, standing in for a chat role."""

    id: str
    name: str
    handle: str = ""
    users: list[str] = field(default_factory=list)

    @property
    def mention(self) -> str:
        return f"<!subteam^{self.id}>"


def _error_code(exc: SlackApiError) -> str:
    return exc.response.get("error", "") if exc.response else ""


async def send_message(channel_id: str, text: str, blocks: list[dict] | None = None) -> dict:
    """Post a message to a channel (or a user id, for a DM). Raises SlackApiError."""
    client = await get_slack_client()
    kwargs: dict = {"channel": channel_id, "text": text}
    if blocks:
        kwargs["blocks"] = blocks
    response = await client.chat_postMessage(**kwargs)
    return response.data


async def find_channel(channel_id: str) -> dict | None:
    """Return channel info, or None when the id does not resolve."""
    if not channel_id:
        return None
    client = await get_slack_client()
    try:
        response = await client.conversations_info(channel=channel_id)
    except SlackApiError as exc:
        if _error_code(exc) == "channel_not_found":
            return None
        raise
    return response.get("channel")


async def list_roles() -> list[Role]:
    """Return every user group in the workspace, with member ids."""
    client = await get_slack_client()
    response = await client.usergroups_list(include_users=True)
    return [
        Role(
            id=group["id"],
            name=group.get("name", ""),
            handle=group.get("handle", ""),
            users=list(group.get("users", [])),
        )
        for group in response.get("usergroups", [])
    ]


async def find_role(name: str) -> Role | None:
    """Find a user group by display name or handle (case-insensitive)."""
    wanted = name.strip().lower()
    if not wanted:
        return None
    for role in await list_roles():
        if wanted in (role.name.lower(), role.handle.lower()):
            return role
    return None


async def deliver(audience: Audience, text: str, blocks: list[dict] | None = None) -> None:
    """Send a notification to a resolved audience, mentioning its role if one is found.

    Raises:
        AudienceLookupError: the audience channel does not resolve.
        SlackApiError: Slack rejected the send.
    """
    if await find_channel(audience.channel_id) is None:
        raise AudienceLookupError(f"Channel not found: {audience.channel_id!r}")

    if audience.role:
        role = await find_role(audience.role)
        if role is None:
            logger.warning("Role %s not found, sending without mention", audience.role)
        else:
            text = f"{role.mention} {text}"
            if blocks:
                mention = {"type": "section", "text": {"type": "mrkdwn", "text": role.mention}}
                blocks = [mention, *blocks]

    await send_message(audience.channel_id, text, blocks)


async def send_direct_message(user_id: str, text: str, blocks: list[dict] | None = None) -> None:
    """DM a user. Fire-and-forget: Slack errors are logged, never raised."""
    try:
        await send_message(user_id, text, blocks)
    except SlackApiError:
        logger.warning("Failed to send direct message to %s", user_id, exc_info=True)


async def set_role_membership(role: Role, user_id: str, member: bool) -> bool:
    """Add or remove a user from a user group. Returns False if nothing changed.

    Raises LastMemberError instead of emptying the group.
    """
    users = [u for u in role.users if u != user_id]
    if member:
        users.append(user_id)
    if sorted(users) == sorted(role.users):
        return False
    # usergroups.users.update replaces the full member list; Slack rejects an empty one
    if not users:
        raise LastMemberError(f"{user_id} is the last member of {role.name}")

    client = await get_slack_client()
    await client.usergroups_users_update(usergroup=role.id, users=",".join(users))
    role.users = users
    return True


async def get_user_name(user_id: str) -> str:
    """Return a user's display name, falling back to the raw id."""
    client = await get_slack_client()
    try:
        response = await client.users_info(user=user_id)
    except SlackApiError:
        logger.warning("Failed to look up user %s", user_id, exc_info=True)
        return user_id
    user = response.get("user") or {}
    profile = user.get("profile") or {}
    return profile.get("display_name") or user.get("real_name") or user.get("name") or user_id
