"""Game server status page scraping."""

import logging

import httpx
from bs4 import BeautifulSoup

from uo_bot.feeds.http import fetch_text
from uo_bot.models.server import ServerStatus

logger = logging.getLogger(__name__)

# Row label on the status page -> ServerStatus field
_FIELDS = {
    "mission": "mission_name",
    "description": "description",
    "players": "players",
    "island": "island",
    "author": "author",
}


def parse_server_page(html: str) -> ServerStatus | None:
    """Extract server status from the label/value table rows on the status page.

    Returns None when the page has no mission row (server down or empty).
    """
    soup = BeautifulSoup(html, "html.parser")
    values: dict[str, str] = {}

    for row in soup.find_all("tr"):
        cells = row.find_all(["th", "td"])
        if len(cells) < 2:
            continue
        label = cells[0].get_text(strip=True).rstrip(":").strip().lower()
        field_name = _FIELDS.get(label)
        if field_name and field_name not in values:
            value = cells[1].get_text(" ", strip=True)
            if value:
                values[field_name] = value

    if "mission_name" not in values:
        return None
    return ServerStatus(**values)


async def scrape_server_page(
    url: str,
    timeout_seconds: float = 15.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ServerStatus | None:
    """Fetch and parse the status page. Raises FeedError when the page cannot be fetched."""
    html = await fetch_text(url, timeout_seconds, transport=transport)
    status = parse_server_page(html)
    if status is None:
        logger.info("No mission found on server page", extra={"url": url})
    return status
