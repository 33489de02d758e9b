"""Turn a page screenshot into a loose record using a vision model."""

from __future__ import annotations

import base64
import json
import logging
import os
import re
from typing import Protocol

from ..config import VISION_MAX_TOKENS, VISION_MODEL
from ..errors import LinkedInError
from ..models import RecordKind
from .capture import CapturedImage

logger = logging.getLogger(__name__)

_PROMPTS = {
    RecordKind.person: """This is a screenshot of a LinkedIn person profile.
Return ONLY valid JSON with this exact structure (use null when a value is not visible):
{
  "name": "full name",
  "headline": "headline under the name",
  "location": "location line",
  "about": "About section text",
  "company": "current company",
  "job_title": "current job title",
  "connection_count": "e.g. 500+",
  "follower_count": "e.g. 1,234",
  "open_to_work": false,
  "experiences": [{"title": "", "company": "", "location": null, "start_date": null, "end_date": null, "duration": null, "description": null}],
  "educations": [{"institution": "", "degree": null, "start_date": null, "end_date": null}],
  "skills": ["skill"]
}""",
    RecordKind.company: """This is a screenshot of a LinkedIn company page.
Return ONLY valid JSON with this exact structure (use null when a value is not visible):
{
  "name": "company name",
  "tagline": "tagline under the name",
  "about": "overview text",
  "website": "website URL",
  "industry": "industry",
  "company_size": "e.g. 1,001-5,000 employees",
  "headquarters": "headquarters location",
  "founded": "year founded",
  "specialties": ["specialty"],
  "employee_count": "employees on LinkedIn",
  "follower_count": "followers"
}""",
    RecordKind.job_details: """This is a screenshot of a LinkedIn job posting.
Return ONLY valid JSON with this exact structure (use null when a value is not visible):
{
  "title": "job title",
  "company": "hiring company",
  "location": "job location",
  "posted_date": "e.g. 2 weeks ago",
  "salary": "salary range",
  "is_easy_apply": false,
  "description": "job description text",
  "workplace_type": "Remote | Hybrid | On-site",
  "employment_type": "Full-time | Part-time | Contract | ...",
  "experience_level": "e.g. Mid-Senior level",
  "applicant_count": "e.g. Over 100",
  "skills": ["skill"]
}""",
}


def parse_json_reply(raw: str) -> dict:
    """Parse a model reply that should hold one JSON object."""
    text = (raw or "").strip()
    text = re.sub(r"^```[a-z]*\n?", "", text)
    text = re.sub(r"\n?```$", "", text)
    text = text.strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Models sometimes wrap the object in prose.
        start, end = text.find("{"), text.rfind("}")
        if start < 0 or end <= start:
            raise LinkedInError.vision_unavailable("reply was not JSON") from None
        try:
            data = json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            raise LinkedInError.vision_unavailable("reply was not JSON") from None
    if not isinstance(data, dict):
        raise LinkedInError.vision_unavailable("reply was not a JSON object")
    return data


class VisionAnalyzer(Protocol):
    async def analyze(self, image: CapturedImage, kind: RecordKind) -> dict: ...


class AnthropicVisionAnalyzer:
    """Vision analyzer backed by the Anthropic Messages API."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str = VISION_MODEL,
        max_tokens: int = VISION_MAX_TOKENS,
        client: object | None = None,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self._api_key = api_key
        self._client = client

    @staticmethod
    def available() -> bool:
        return bool(os.environ.get("ANTHROPIC_API_KEY", "").strip())

    def _get_client(self) -> object:
        if self._client is None:
            import anthropic

            key = self._api_key or os.environ.get("ANTHROPIC_API_KEY", "").strip()
            if not key:
                raise LinkedInError.vision_unavailable("ANTHROPIC_API_KEY is not set")
            self._client = anthropic.AsyncAnthropic(api_key=key)
        return self._client

    async def analyze(self, image: CapturedImage, kind: RecordKind) -> dict:
        prompt = _PROMPTS.get(kind)
        if prompt is None:
            raise LinkedInError.vision_unavailable(f"no vision prompt for {kind.value}")

        client = self._get_client()
        content = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.media_type,
                    "data": base64.standard_b64encode(image.data).decode("utf-8"),
                },
            },
            {"type": "text", "text": prompt},
        ]
        try:
            response = await client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": content}],
            )
        except Exception as exc:
            logger.warning("Vision request failed: %s", exc)
            raise LinkedInError.vision_unavailable(str(exc) or type(exc).__name__) from exc

        raw = "".join(getattr(block, "text", "") for block in response.content)
        data = parse_json_reply(raw)
        logger.info("Vision extracted %d fields for %s", len(data), kind.value)
        return data
