"""Turn loose user input (slug, numeric id or full URL) into canonical identifiers."""

from __future__ import annotations

import re
from urllib.parse import unquote, urlparse

from .errors import LinkedInError

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_HOST_RE = re.compile(r"^(?:[a-z0-9-]+\.)*linkedin\.com(?=[/:?#]|$)", re.IGNORECASE)
_SLUG_RE = re.compile(r"^[^\s/?#]+$")
_URN_RE = re.compile(r"urn:li:(?:profile|miniProfile):.+")


def _is_linkedin_host(host: str | None) -> bool:
    host = (host or "").lower().rstrip(".")
    return host == "linkedin.com" or host.endswith(".linkedin.com")


def _path_segments(raw: str) -> list[str] | None:
    """Return the URL path segments when *raw* looks like a URL, else None.

    URLs on any other host yield no segments.
    """
    value = raw.strip()
    if not _SCHEME_RE.match(value):
        if not _HOST_RE.match(value):
            return None
        value = f"https://{value}"
    parsed = urlparse(value)
    if not _is_linkedin_host(parsed.hostname):
        return []
    path = unquote(parsed.path or "")
    return [seg for seg in path.split("/") if seg]


def _extract_slug(raw: str | None, section: str) -> str | None:
    if not raw:
        return None
    value = raw.strip()
    if not value:
        return None

    segments = _path_segments(value)
    if segments is None:
        # Bare slug.
        if "linkedin.com" in value.lower() or not _SLUG_RE.match(value):
            return None
        return value

    if len(segments) < 2 or segments[0].lower() != section:
        return None
    slug = segments[1].strip()
    return slug or None


def extract_username(raw: str | None) -> str | None:
    """Person slug from ``linkedin.com/in/<slug>/`` or a bare slug."""
    return _extract_slug(raw, "in")


def extract_company_slug(raw: str | None) -> str | None:
    """Organization slug from ``linkedin.com/company/<slug>/`` or a bare slug."""
    return _extract_slug(raw, "company")


def extract_job_id(raw: str | None) -> str | None:
    """Numeric job id from ``linkedin.com/jobs/view/<digits>/`` or a bare number."""
    if not raw:
        return None
    value = raw.strip()
    segments = _path_segments(value)
    if segments is None:
        return value if value.isdigit() and value.isascii() else None

    if len(segments) < 3 or [s.lower() for s in segments[:2]] != ["jobs", "view"]:
        return None
    job_id = segments[2]
    return job_id if job_id.isdigit() and job_id.isascii() else None


def is_valid_urn(value: str | None) -> bool:
    if not isinstance(value, str):
        return False
    return _URN_RE.fullmatch(value) is not None


def validate_urn(value: str | None) -> str:
    """Return *value* unchanged if it is a member URN, else raise ``invalid_urn``."""
    if not is_valid_urn(value):
        raise LinkedInError.invalid_urn("" if value is None else str(value))
    return value
