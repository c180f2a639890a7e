"""Event reminder engine.

Holds the current calendar event set and, on each tick, sends one reminder per
(event, reminder label) pair when the time left until the event matches a
configured label exactly.

Labels are marked sent *before* the send is attempted, so a slow or failing
send never produces a duplicate within the process lifetime; the trade-off is
that a failed reminder is not retried.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from datetime import datetime, timezone

from uo_bot.messages import event_message
from uo_bot.models.events import EventRecord
from uo_bot.routing import Audience, NotificationRouter
from uo_bot.timing import distance_label

logger = logging.getLogger(__name__)

Deliver = Callable[[Audience, str, list[dict] | None], Awaitable[None]]


class ReminderEngine:
    """Owns the retained event records and their reminder-sent flags."""

    def __init__(
        self,
        labels: Iterable[str],
        router: NotificationRouter,
        deliver: Deliver,
        send_timeout: float = 30.0,
    ) -> None:
        self.labels = list(labels)
        self._router = router
        self._deliver = deliver
        self._send_timeout = send_timeout
        self._events: list[EventRecord] = []

    @property
    def events(self) -> list[EventRecord]:
        return list(self._events)

    def replace_events(self, records: Sequence[EventRecord]) -> None:
        """Swap in a fresh feed pull, carrying sent flags forward by (title, date).

        Entries missing from the new pull are dropped along with their flags.
        """
        previous = {event.key: event.reminders_sent for event in self._events}
        for record in records:
            sent = previous.get(record.key)
            if sent:
                record.reminders_sent = {**sent, **record.reminders_sent}
        self._events = list(records)

    def due_reminders(self, now: datetime) -> list[tuple[EventRecord, str]]:
        """Return (event, label) pairs due at ``now`` and mark each label sent.

        Runs without suspending, so concurrent feed refreshes never see a
        half-marked event set.
        """
        due: list[tuple[EventRecord, str]] = []
        for event in self._events:
            if event.date <= now:
                continue
            label = distance_label(now, event.date)
            if label in self.labels and not event.reminders_sent.get(label):
                event.reminders_sent[label] = True
                due.append((event, label))
        return due

    async def check_reminders(self, now: datetime | None = None) -> int:
        """Send every reminder due at ``now``. Returns the number of sends attempted."""
        now = now or datetime.now(timezone.utc)
        due = self.due_reminders(now)
        if due:
            await asyncio.gather(*(self._send(event, label) for event, label in due))
        return len(due)

    async def _send(self, event: EventRecord, label: str) -> None:
        logger.info(
            "Sending notification for event: %s",
            event.title,
            extra={"group": event.group.value, "label": label},
        )
        audience = self._router.resolve_audience(event.group)
        text, blocks = event_message(event, label)
        try:
            async with asyncio.timeout(self._send_timeout):
                await self._deliver(audience, text, blocks)
        except Exception as exc:
            logger.error(
                "Reminder for %s failed: %s",
                event.title,
                exc,
                exc_info=True,
                extra={"channel": audience.channel_id, "label": label},
            )
