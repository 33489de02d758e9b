"""Dispatch a fetched document to the matching page parser."""

from __future__ import annotations

import logging
import re

from ..errors import LinkedInError
from ..models import RecordKind
from .common import css_first, first_text
from .company_parser import parse_company_profile
from .job_parser import parse_job_details
from .profile_parser import parse_person_profile

logger = logging.getLogger(__name__)

_NOT_FOUND_TITLE_RE = re.compile(r"^\s*page not found\b", re.IGNORECASE)
_NOT_FOUND_TEXT = (
    "this page doesn’t exist",
    "this page doesn't exist",
    "profile is not available",
    "this job is no longer available",
    "page not found",
)

_WHAT = {
    RecordKind.person: "Profile",
    RecordKind.company: "Company",
    RecordKind.job_details: "Job",
}


def is_not_found_page(page: object) -> bool:
    """True when the document is LinkedIn's "page not found" screen."""
    title = first_text(page, ("title",)) or ""
    if _NOT_FOUND_TITLE_RE.search(title):
        return True
    if css_first(page, "main.not-found, section.not-found, div.not-found__container") is not None:
        return True
    heading = (first_text(page, ("main h1", "h1", "h2")) or "").lower()
    return any(marker in heading for marker in _NOT_FOUND_TEXT)


def parse_document(document: object, kind: RecordKind, identifier: str):
    """Parse *document* (a ``fetcher.Document``) into the record for *kind*.

    Raises ``parse_error`` on an empty body and ``record_not_found`` on the
    not-found page. Anything else returns a record, possibly without its
    primary field; sufficiency is left to the caller.
    """
    if document.is_empty:
        raise LinkedInError.parse_error("empty document")

    page = document.page
    if is_not_found_page(page):
        logger.info("%s not found: %s", _WHAT.get(kind, "Record"), identifier)
        raise LinkedInError.record_not_found(_WHAT.get(kind, "Record"))

    if kind == RecordKind.person:
        return parse_person_profile(page, identifier)
    if kind == RecordKind.company:
        return parse_company_profile(page, identifier)
    if kind == RecordKind.job_details:
        return parse_job_details(page, identifier)
    raise ValueError(f"No single-record parser for {kind.value}")

