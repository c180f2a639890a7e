"""Tests for server status page scraping."""

import httpx
import pytest

from uo_bot.feeds.http import FeedError
from uo_bot.feeds.server import parse_server_page, scrape_server_page

STATUS_URL = "http://example.com/uosim/"

STATUS_PAGE = """
<html><body>
  <h1>Primary Server</h1>
  <table>
    <tr><td>Mission:</td><td>CO40 Operation Bravo</td></tr>
    <tr><td>Description:</td><td>Clear the <i>valley</i> of hostiles.</td></tr>
    <tr><td>Players:</td><td>23/64</td></tr>
    <tr><td>Island:</td><td>Altis</td></tr>
    <tr><td>Author:</td><td>Someone</td></tr>
    <tr><td colspan="2">Last updated 2 minutes ago</td></tr>
  </table>
</body></html>
"""

EMPTY_PAGE = """
<html><body><table>
  <tr><td>Status:</td><td>Offline</td></tr>
</table></body></html>
"""


def test_parse_server_page():
    status = parse_server_page(STATUS_PAGE)

    assert status is not None
    assert status.mission_name == "CO40 Operation Bravo"
    assert status.description == "Clear the valley of hostiles."
    assert status.players == "23/64"
    assert status.player_count == 23
    assert status.island == "Altis"
    assert status.author == "Someone"


def test_parse_server_page_without_mission_returns_none():
    assert parse_server_page(EMPTY_PAGE) is None


def test_parse_server_page_missing_fields_use_defaults():
    page = "<table><tr><th>Mission</th><td>TVT20 Hold</td></tr></table>"
    status = parse_server_page(page)
    assert status.mission_name == "TVT20 Hold"
    assert status.island == "Unknown"
    assert status.player_count == 0


async def test_scrape_server_page():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text=STATUS_PAGE))

    status = await scrape_server_page(STATUS_URL, transport=transport)

    assert status.mission_name == "CO40 Operation Bravo"


async def test_scrape_server_page_http_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(403, text="denied"))

    with pytest.raises(FeedError):
        await scrape_server_page(STATUS_URL, transport=transport)
