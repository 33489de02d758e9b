"""Read and write operations against LinkedIn for one authenticated session."""

from __future__ import annotations

import logging

from . import writer
from .auth.session_manager import SessionManager
from .config import DEFAULT_JOB_LIMIT, MAX_JOB_LIMIT, VISION_FALLBACK_ENABLED
from .errors import LinkedInError
from .fetcher import (
    HttpTransport,
    company_url,
    fetch_document,
    job_search_url,
    job_url,
    profile_url,
)
from .identifiers import extract_company_slug, extract_job_id, extract_username
from .models import AuthStatus, CompanyProfile, JobDetails, JobListing, PersonProfile, RecordKind, WriteResult
from .parsers.document import parse_document
from .parsers.job_parser import parse_job_search
from .parsers.signal import has_primary_signal
from .vision.fallback import VisionFallback

logger = logging.getLogger(__name__)


def default_vision() -> VisionFallback | None:
    """Browser capture plus Anthropic analysis, when an API key is present."""
    from .vision.analyzer import AnthropicVisionAnalyzer
    from .vision.capture import BrowserScreenCapture

    if not AnthropicVisionAnalyzer.available():
        return None
    return VisionFallback(BrowserScreenCapture(), AnthropicVisionAnalyzer())


class LinkedInClient:
    """Entry point for profile, company and job reads and for writes.

    *vision* is the recovery path used when a structural parse comes back
    without a name or title; leave it ``None`` to disable recovery entirely.
    """

    def __init__(
        self,
        session: SessionManager | None = None,
        transport: HttpTransport | None = None,
        vision: VisionFallback | None = None,
        use_vision_fallback: bool = True,
    ) -> None:
        self.session = session or SessionManager()
        self.transport = transport or HttpTransport()
        self.vision = vision
        self.use_vision_fallback = use_vision_fallback

    @classmethod
    def from_env(cls, cookie: str | None = None) -> LinkedInClient:
        vision = default_vision() if VISION_FALLBACK_ENABLED else None
        return cls(session=SessionManager(cookie), vision=vision, use_vision_fallback=vision is not None)

    async def __aenter__(self) -> LinkedInClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.transport.aclose()

    @property
    def vision_enabled(self) -> bool:
        return self.use_vision_fallback and self.vision is not None

    # ── Session ──────────────────────────────────────────────────────────

    async def configure(self, cookie: str) -> None:
        await self.session.configure(cookie)

    async def verify_auth(self) -> AuthStatus:
        return await self.session.verify(self.transport)

    # ── Reads ────────────────────────────────────────────────────────────

    async def get_profile(self, username: str) -> PersonProfile:
        slug = extract_username(username)
        if not slug:
            raise LinkedInError.invalid_identifier(username, "profile")
        logger.info("Fetching profile: %s", slug)
        return await self._read(RecordKind.person, slug, profile_url(slug))

    async def get_company(self, name: str) -> CompanyProfile:
        slug = extract_company_slug(name)
        if not slug:
            raise LinkedInError.invalid_identifier(name, "company")
        logger.info("Fetching company: %s", slug)
        return await self._read(RecordKind.company, slug, company_url(slug))

    async def get_job(self, job_id: str) -> JobDetails:
        jid = extract_job_id(job_id)
        if not jid:
            raise LinkedInError.invalid_identifier(job_id, "job id")
        logger.info("Fetching job: %s", jid)
        return await self._read(RecordKind.job_details, jid, job_url(jid))

    async def search_jobs(
        self,
        query: str,
        location: str | None = None,
        limit: int = DEFAULT_JOB_LIMIT,
    ) -> list[JobListing]:
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= MAX_JOB_LIMIT:
            raise LinkedInError.invalid_argument("limit", limit, f"an integer from 1 to {MAX_JOB_LIMIT}")
        query = (query or "").strip()
        if not query:
            raise LinkedInError.invalid_identifier(query, "search query")
        logger.info("Searching jobs: %s", query)
        document = await fetch_document(job_search_url(query, location or None), self.session, self.transport)
        if document.is_empty:
            raise LinkedInError.parse_error("empty document")
        return parse_job_search(document.page, limit)

    async def _read(self, kind: RecordKind, identifier: str, url: str):
        # Raises not_authenticated before any network call when unconfigured.
        await self.session.token()
        try:
            document = await fetch_document(url, self.session, self.transport)
            record = parse_document(document, kind, identifier)
        except LinkedInError as exc:
            if not (exc.fallback_eligible and self.vision_enabled):
                raise
            return await self._recover(exc, kind, identifier, url)

        if has_primary_signal(record):
            return record
        if not self.vision_enabled:
            logger.warning("No name or title found for %s %s", kind.value, identifier)
            return record
        field = "title" if kind == RecordKind.job_details else "name"
        return await self._recover(
            LinkedInError.parse_error(f"no {field} found for {identifier}"),
            kind,
            identifier,
            url,
        )

    async def _recover(self, original: LinkedInError, kind: RecordKind, identifier: str, url: str):
        logger.warning("Structural read of %s failed (%s); trying vision", identifier, original.kind.value)
        try:
            token = await self.session.token()
            record = await self.vision.recover(identifier, kind, url, token)
        except LinkedInError as exc:
            logger.warning("Vision fallback failed for %s: %s", identifier, exc.message)
            raise original from exc
        logger.info("Vision recovered %s %s", kind.value, identifier)
        return record

    # ── Writes ───────────────────────────────────────────────────────────

    async def send_invite(self, urn: str, message: str | None = None) -> WriteResult:
        return await writer.send_invite(urn, message, self.session, self.transport)

    async def send_message(self, urn: str, text: str) -> WriteResult:
        return await writer.send_message(urn, text, self.session, self.transport)
