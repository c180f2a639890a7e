"""Community calendar RSS feed: fetch and parse into EventRecords."""

import logging
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httpx
from bs4 import BeautifulSoup

from uo_bot.feeds.http import FeedError, fetch_text
from uo_bot.models.events import EventGroup, EventRecord

logger = logging.getLogger(__name__)

# Event titles are prefixed with their group, e.g. "UOA3: Sunday Ops" or "[UOAF] Campaign Night"
_GROUP_PATTERN = re.compile(r"^\W*(UOA3|UOAF|UOTC)\b", re.IGNORECASE)


def detect_group(title: str) -> EventGroup:
    """Classify an event by the group tag at the start of its title."""
    match = _GROUP_PATTERN.match(title)
    if match is None:
        return EventGroup.OTHER
    return EventGroup(match.group(1).upper())


def _parse_date(raw: str) -> datetime | None:
    try:
        parsed = parsedate_to_datetime(raw)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _text(item, tag: str) -> str:
    element = item.find(tag)
    return element.get_text(strip=True) if element is not None else ""


def parse_feed(xml: str) -> list[EventRecord]:
    """Parse an RSS 2.0 document into event records.

    Items without a title or a parsable ``pubDate`` are skipped.
    """
    soup = BeautifulSoup(xml, "xml")
    if soup.find("rss") is None and soup.find("channel") is None:
        raise FeedError("Document is not an RSS feed")

    events: list[EventRecord] = []
    for item in soup.find_all("item"):
        title = _text(item, "title")
        date = _parse_date(_text(item, "pubDate"))
        if not title or date is None:
            logger.warning("Skipping calendar item without title or date: %r", title)
            continue

        description = BeautifulSoup(_text(item, "description"), "html.parser").get_text(" ", strip=True)
        events.append(
            EventRecord(
                title=title,
                date=date,
                group=detect_group(title),
                link=_text(item, "link") or None,
                description=description,
            )
        )
    return events


class CalendarFeed:
    """Pulls the community calendar and keeps the most recent result."""

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self.events: list[EventRecord] = []

    async def fetch_events(self) -> list[EventRecord]:
        """Fetch and parse the feed. Raises FeedError on network or parse failure."""
        xml = await fetch_text(self.url, self.timeout_seconds, transport=self._transport)
        return parse_feed(xml)

    async def pull(self) -> list[EventRecord]:
        """Fetch the feed and replace the held event list."""
        self.events = await self.fetch_events()
        logger.info("Pulled %d calendar events", len(self.events), extra={"url": self.url})
        return self.events
