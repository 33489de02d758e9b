"""Connection invites and direct messages over LinkedIn's internal API."""

from __future__ import annotations

import logging

from .auth.session_manager import SessionManager
from .config import API_URL, COOKIE_NAME
from .errors import LinkedInError
from .fetcher import BROWSER_HEADERS, HttpTransport, TransportResponse
from .identifiers import validate_urn
from .models import WriteResult

logger = logging.getLogger(__name__)

INVITE_URL = f"{API_URL}/voyagerRelationshipsDashMemberRelationships?action=verifyQuotaAndCreateV2"
MESSAGE_URL = f"{API_URL}/messaging/conversations?action=create"

MESSAGE_CREATE_KEY = "com.linkedin.voyager.messaging.create.MessageCreate"

API_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/vnd.linkedin.normalized+json+2.1",
    "X-RestLi-Protocol-Version": "2.0.0",
    "X-Li-Lang": "en_US",
}


def build_invite_payload(urn: str, message: str | None = None) -> dict:
    payload: dict = {"invitee": {"inviteeUnion": {"memberProfile": urn}}}
    if message:
        payload["customMessage"] = message
    return payload


def build_message_payload(urn: str, text: str) -> dict:
    return {
        "keyVersion": "LEGACY_INBOX",
        "conversationCreate": {
            "eventCreate": {
                "value": {
                    MESSAGE_CREATE_KEY: {
                        "attributedBody": {"text": text},
                    }
                }
            },
            "recipients": [urn],
            "subtype": "MEMBER_TO_MEMBER",
        },
    }


def classify_write_response(response: TransportResponse) -> WriteResult:
    """Map a write response to a result, or raise the matching error."""
    path = response.path
    if "login" in path:
        raise LinkedInError.not_authenticated()
    if "checkpoint" in path:
        raise LinkedInError.security_challenge()
    if response.status == 429:
        raise LinkedInError.rate_limited()
    if not 200 <= response.status < 300:
        raise LinkedInError.http_error(response.status)
    return WriteResult(success=True, status_code=response.status)


async def _post(url: str, payload: dict, session: SessionManager, transport: HttpTransport) -> WriteResult:
    token = await session.token()
    headers = {
        **API_HEADERS,
        "User-Agent": BROWSER_HEADERS["User-Agent"],
        "Cookie": f"{COOKIE_NAME}={token}",
    }
    response = await transport.post(url, headers=headers, json=payload)
    return classify_write_response(response)


async def send_invite(
    urn: str,
    message: str | None,
    session: SessionManager,
    transport: HttpTransport,
) -> WriteResult:
    """Send one connection invite. Single attempt; no retries."""
    urn = validate_urn(urn)
    message = (message or "").strip() or None
    result = await _post(INVITE_URL, build_invite_payload(urn, message), session, transport)
    result.message = "Invitation sent"
    logger.info("Invitation sent to %s (HTTP %d)", urn, result.status_code)
    return result


async def send_message(
    urn: str,
    text: str,
    session: SessionManager,
    transport: HttpTransport,
) -> WriteResult:
    """Open a conversation with *urn* and post *text*. Single attempt."""
    urn = validate_urn(urn)
    if not (text or "").strip():
        raise LinkedInError.invalid_argument("message text", text, "non-empty text")
    result = await _post(MESSAGE_URL, build_message_payload(urn, text), session, transport)
    result.message = "Message sent"
    logger.info("Message sent to %s (HTTP %d)", urn, result.status_code)
    return result
