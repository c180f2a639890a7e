"""Signature check for inbound Slack events, used as a FastAPI dependency."""

import json
import logging

from fastapi import HTTPException, Request
from slack_sdk.signature import SignatureVerifier

from uo_bot.config import get_settings

logger = logging.getLogger(__name__)


async def verify_slack_request(request: Request) -> dict:
    """Return the event payload once its signature checks out.

    The payload is decoded from the same bytes the signature covers. Without a
    configured signing secret every request is refused.

    Raises HTTPException(403) on a bad signature, 400 on a malformed body.
    """
    secret = get_settings().slack_signing_secret
    if not secret:
        logger.error("SLACK_SIGNING_SECRET is not configured, refusing Slack event")
        raise HTTPException(status_code=403, detail="Slack signing secret not configured")

    body = (await request.body()).decode("utf-8")
    verifier = SignatureVerifier(signing_secret=secret)
    if not verifier.is_valid(
        body=body,
        timestamp=request.headers.get("X-Slack-Request-Timestamp", ""),
        signature=request.headers.get("X-Slack-Signature", ""),
    ):
        logger.warning("Rejected Slack event with invalid signature")
        raise HTTPException(status_code=403, detail="Invalid Slack signature")

    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Malformed event payload") from None
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Malformed event payload")
    return payload
