"""Authenticated document fetch and transport-outcome classification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from urllib.parse import urlencode, urlparse

import httpx
from scrapling.parser import Adaptor

from .auth.session_manager import SessionManager
from .config import BASE_URL, COOKIE_NAME, HTTP_TIMEOUT
from .errors import LinkedInError

logger = logging.getLogger(__name__)

# Browser identity presented on every document request. Part of the wire
# contract: anything else is more likely to be flagged as automation.
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate, br",
    "DNT": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
}


@dataclass(frozen=True)
class TransportResponse:
    status: int
    url: str
    content: bytes = b""

    @property
    def path(self) -> str:
        return urlparse(self.url).path or ""


class HttpTransport:
    """Async HTTP transport over ``httpx`` that follows redirects.

    *transport* is handed to ``httpx.AsyncClient`` unchanged, which lets
    tests plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        *,
        timeout: float = HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def get(self, url: str, *, headers: dict[str, str]) -> TransportResponse:
        return await self._send("GET", url, headers=headers)

    async def post(self, url: str, *, headers: dict[str, str], json: dict) -> TransportResponse:
        return await self._send("POST", url, headers=headers, json=json)

    async def _send(self, method: str, url: str, **kwargs: object) -> TransportResponse:
        client = self._get_client()
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise LinkedInError.invalid_response(str(exc) or type(exc).__name__) from exc
        return TransportResponse(
            status=response.status_code,
            url=str(response.url),
            content=response.content,
        )


@dataclass
class Document:
    """A fetched page: final URL, status and decoded body."""

    url: str
    status: int
    text: str

    @cached_property
    def page(self) -> Adaptor:
        return Adaptor(self.text, url=self.url)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


def classify_read_response(response: TransportResponse) -> str:
    """Return the decoded body or raise the matching ``LinkedInError``."""
    path = response.path
    if "login" in path:
        raise LinkedInError.not_authenticated()
    if "checkpoint" in path:
        raise LinkedInError.security_challenge()
    if response.status != 200:
        raise LinkedInError.http_error(response.status)
    try:
        return response.content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise LinkedInError.invalid_response("body is not valid UTF-8") from exc


async def fetch_document(url: str, session: SessionManager, transport: HttpTransport) -> Document:
    """GET *url* with the session cookie and classify the outcome. No retries."""
    token = await session.token()
    headers = {**BROWSER_HEADERS, "Cookie": f"{COOKIE_NAME}={token}"}
    response = await transport.get(url, headers=headers)
    text = classify_read_response(response)
    logger.debug("Fetched %s (%d bytes)", response.url, len(text))
    return Document(url=response.url, status=response.status, text=text)


# ── Resource paths ────────────────────────────────────────────────────────

def profile_url(username: str) -> str:
    return f"{BASE_URL}/in/{username}/"


def company_url(slug: str) -> str:
    return f"{BASE_URL}/company/{slug}/"


def job_search_url(query: str, location: str | None = None) -> str:
    params = {"keywords": query, "refresh": "true"}
    if location:
        params["location"] = location
    return f"{BASE_URL}/jobs/search/?{urlencode(params)}"


def job_url(job_id: str) -> str:
    return f"{BASE_URL}/jobs/view/{job_id}/"
