"""Shared HTTP fetch for feed collaborators, with bounded retries."""

import logging

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

logger = logging.getLogger(__name__)

USER_AGENT = "uo-bot/0.1 (+https://unitedoperations.net)"


class FeedError(Exception):
    """A feed could not be fetched or parsed."""


def _is_retryable(error: BaseException) -> bool:
    """Network errors and 5xx/429 responses are transient; other HTTP statuses are not."""
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        return status >= 500 or status == 429
    return isinstance(error, httpx.TransportError)


@retry(
    retry=retry_if_exception(_is_retryable),
    wait=wait_exponential_jitter(initial=1, max=10, jitter=1),
    stop=stop_after_attempt(3),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def _get(client: httpx.AsyncClient, url: str) -> str:
    response = await client.get(url)
    response.raise_for_status()
    return response.text


async def fetch_text(
    url: str,
    timeout_seconds: float = 15.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """GET a URL and return the body text.

    Raises:
        FeedError: the request failed after retries or returned an error status.
    """
    try:
        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=httpx.Timeout(timeout_seconds),
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        ) as client:
            return await _get(client, url)
    except httpx.HTTPError as exc:
        raise FeedError(f"Failed to fetch {url}: {exc}") from exc
