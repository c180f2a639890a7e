"""Feed collaborators: calendar RSS pulls and server status scraping."""

from uo_bot.feeds.calendar import CalendarFeed, detect_group, parse_feed
from uo_bot.feeds.http import FeedError, fetch_text
from uo_bot.feeds.server import parse_server_page, scrape_server_page

__all__ = [
    "CalendarFeed",
    "FeedError",
    "detect_group",
    "fetch_text",
    "parse_feed",
    "parse_server_page",
    "scrape_server_page",
]
