"""Slack message builders for reminders, mission announcements, and greetings.

Each builder returns a ``(text, blocks)`` pair: ``text`` is the plain-text
fallback Slack shows in notifications, ``blocks`` is the Block Kit layout.
"""

from uo_bot.models.events import EventGroup, EventRecord
from uo_bot.models.server import ServerStatus

_GROUP_NAMES = {
    EventGroup.UOA3: "ArmA 3",
    EventGroup.UOAF: "Falcon BMS",
    EventGroup.UOTC: "Training Center",
    EventGroup.OTHER: "Community",
}

_MAX_DESCRIPTION = 300


def _truncate(text: str, limit: int = _MAX_DESCRIPTION) -> str:
    text = text.strip()
    return text if len(text) <= limit else text[: limit - 3].rstrip() + "..."


def event_message(event: EventRecord, label: str) -> tuple[str, list[dict]]:
    """Build a reminder for an upcoming calendar event."""
    title = f"<{event.link}|{event.title}>" if event.link else event.title
    starts = event.date.strftime("%a %b %d, %H:%M UTC")
    text = f"Reminder: {event.title} starts in {label}"

    blocks: list[dict] = [
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": f"*{title}*\nStarts in *{label}* ({starts})"},
        },
    ]
    if event.description:
        blocks.append(
            {"type": "section", "text": {"type": "mrkdwn", "text": _truncate(event.description)}}
        )
    blocks.append(
        {
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": f"{_GROUP_NAMES[event.group]} event"}],
        }
    )
    return text, blocks


def server_message(status: ServerStatus) -> tuple[str, list[dict]]:
    """Build a server status card (used for new mission alerts and !primary)."""
    text = f"{status.mission_name} on {status.island} ({status.players} players)"
    fields = [
        {"type": "mrkdwn", "text": f"*Mission*\n{status.mission_name}"},
        {"type": "mrkdwn", "text": f"*Players*\n{status.players}"},
        {"type": "mrkdwn", "text": f"*Island*\n{status.island}"},
        {"type": "mrkdwn", "text": f"*Author*\n{status.author}"},
    ]
    blocks: list[dict] = [
        {"type": "section", "fields": fields},
        {"type": "section", "text": {"type": "mrkdwn", "text": _truncate(status.description)}},
    ]
    return text, blocks


def welcome_message(username: str) -> tuple[str, list[dict]]:
    """Build the DM sent to new workspace members."""
    text = f"Welcome to United Operations, {username}!"
    body = (
        f"*Welcome to United Operations, {username}!*\n"
        "Events are announced in the game channels, with reminders a day and an hour before they start. "
        "Type `!help` in any channel to see what I can do, and `!join_group <name>` to pick up game roles."
    )
    return text, [{"type": "section", "text": {"type": "mrkdwn", "text": body}}]


def help_message(commands: dict[str, str]) -> str:
    """Render the command list (command -> one-line description) as mrkdwn."""
    lines = ["*Available commands*"]
    lines.extend(f"`!{name}` {description}" for name, description in sorted(commands.items()))
    return "\n".join(lines)
