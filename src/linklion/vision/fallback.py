"""Screenshot-and-analyze recovery for reads the structural parser missed."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ..errors import LinkedInError
from ..models import (
    CompanyProfile,
    Education,
    Experience,
    JobDetails,
    PersonProfile,
    RecordKind,
)
from ..parsers.signal import has_primary_signal
from .analyzer import VisionAnalyzer
from .capture import ScreenCapture

logger = logging.getLogger(__name__)


def _text(value: object) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        value = value.strip()
        if value and value.lower() not in {"null", "none", "n/a"}:
            return value
    return None


def _flag(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1"}
    return False


def _strings(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [s for s in (_text(v) for v in value) if s]


def _get(data: dict, key: str) -> object:
    """Look up *key* in snake_case, falling back to camelCase."""
    if key in data:
        return data[key]
    head, *rest = key.split("_")
    return data.get(head + "".join(part.title() for part in rest))


def _items(value: object, model: type, required: str) -> list:
    """Build *model* from each dict in *value*; malformed entries are dropped."""
    if not isinstance(value, list):
        return []
    out = []
    for entry in value:
        if not isinstance(entry, dict) or not _text(_get(entry, required)):
            continue
        fields = {name: _text(_get(entry, name)) for name in model.model_fields}
        fields = {k: v for k, v in fields.items() if v is not None}
        try:
            out.append(model(**fields))
        except ValidationError:
            logger.debug("Dropped malformed %s entry from vision reply", model.__name__, exc_info=True)
    return out


def to_record(data: dict, kind: RecordKind, identifier: str):
    """Map a loose vision reply onto the typed record for *kind*.

    The requested identifier fills in when the reply has none.
    """
    if kind == RecordKind.person:
        return PersonProfile(
            username=_text(_get(data, "username")) or identifier,
            name=_text(data.get("name")) or "",
            headline=_text(data.get("headline")),
            about=_text(data.get("about")),
            location=_text(data.get("location")),
            company=_text(data.get("company")),
            job_title=_text(_get(data, "job_title")),
            experiences=_items(data.get("experiences"), Experience, "title"),
            educations=_items(data.get("educations"), Education, "institution"),
            skills=_strings(data.get("skills")),
            connection_count=_text(_get(data, "connection_count")),
            follower_count=_text(_get(data, "follower_count")),
            open_to_work=_flag(_get(data, "open_to_work")),
        )
    if kind == RecordKind.company:
        return CompanyProfile(
            name=_text(data.get("name")) or "",
            slug=_text(data.get("slug")) or identifier,
            tagline=_text(data.get("tagline")),
            about=_text(data.get("about")),
            website=_text(data.get("website")),
            industry=_text(data.get("industry")),
            company_size=_text(_get(data, "company_size")),
            headquarters=_text(data.get("headquarters")),
            founded=_text(data.get("founded")),
            specialties=_strings(data.get("specialties")),
            employee_count=_text(_get(data, "employee_count")),
            follower_count=_text(_get(data, "follower_count")),
        )
    if kind == RecordKind.job_details:
        return JobDetails(
            id=identifier,
            title=_text(data.get("title")) or "",
            company=_text(data.get("company")) or "",
            location=_text(data.get("location")),
            posted_date=_text(_get(data, "posted_date")),
            salary=_text(data.get("salary")),
            is_easy_apply=_flag(_get(data, "is_easy_apply")),
            description=_text(data.get("description")),
            workplace_type=_text(_get(data, "workplace_type")),
            employment_type=_text(_get(data, "employment_type")),
            experience_level=_text(_get(data, "experience_level")),
            applicant_count=_text(_get(data, "applicant_count")),
            skills=_strings(data.get("skills")),
        )
    raise LinkedInError.vision_unavailable(f"no vision mapping for {kind.value}")


class VisionFallback:
    """Capture the live page, ask the analyzer, map the answer to a record."""

    def __init__(self, capture: ScreenCapture, analyzer: VisionAnalyzer) -> None:
        self.capture = capture
        self.analyzer = analyzer

    async def recover(self, identifier: str, kind: RecordKind, url: str, token: str):
        logger.info("Vision fallback for %s %s", kind.value, identifier)
        image = await self.capture.capture(url, token)
        data = await self.analyzer.analyze(image, kind)
        record = to_record(data, kind, identifier)
        if not has_primary_signal(record):
            raise LinkedInError.vision_unavailable("no name or title visible in the screenshot")
        return record
