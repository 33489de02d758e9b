"""Parser for company About pages."""

from __future__ import annotations

import logging
import re

from ..models import CompanyProfile
from .common import (
    attr,
    clean_text,
    css_first,
    extract_count,
    first_node,
    first_text,
    full_text,
    safe_css,
    texts,
)

logger = logging.getLogger(__name__)

NAME_SELECTORS = (
    "h1.org-top-card-summary__title",
    "h1.top-card-layout__title",
    "h1[class*='org-top-card']",
    "h1",
)
TAGLINE_SELECTORS = (
    "p.org-top-card-summary__tagline",
    "h4.top-card-layout__second-subline",
    "h2.top-card-layout__headline",
    "p[class*='tagline']",
)
ABOUT_SELECTORS = (
    "p.break-words.white-space-pre-wrap",
    "section.org-about-module p",
    "section.about-us p",
    "p[data-test-id='about-us__description']",
)

# Label text on the About definition list, mapped to CompanyProfile fields.
_DETAIL_LABELS = {
    "website": "website",
    "industry": "industry",
    "industries": "industry",
    "company size": "company_size",
    "headquarters": "headquarters",
    "founded": "founded",
    "specialties": "specialties",
}

# Guest pages tag each row with data-test-id="about-us__<field>".
_TEST_ID_FIELDS = {
    "website": "website",
    "industry": "industry",
    "size": "company_size",
    "headquarters": "headquarters",
    "foundedOn": "founded",
    "specialties": "specialties",
}


def _definition_pairs(page: object) -> dict[str, str]:
    """Read the About definition list into ``{field: value}``."""
    found: dict[str, str] = {}

    for dl in safe_css(page, "dl"):
        label = None
        for node in safe_css(dl, "dt, dd"):
            tag = getattr(node, "tag", "")
            text = full_text(node)
            if tag == "dt":
                label = text.lower()
            elif tag == "dd" and label:
                field = _DETAIL_LABELS.get(label)
                if field and text and field not in found:
                    found[field] = text
                # A second dd under company size holds the "on LinkedIn" count.
                elif field == "company_size" and text and "employee_count_hint" not in found:
                    found["employee_count_hint"] = text

    for test_id, field in _TEST_ID_FIELDS.items():
        if field in found:
            continue
        value = first_text(page, (f"[data-test-id='about-us__{test_id}'] dd",))
        if value:
            found[field] = value

    return found


def _website(page: object, details: dict[str, str]) -> str | None:
    link = first_node(
        page,
        ("[data-test-id='about-us__website'] a", "dd a[href^='http']:not([href*='linkedin.com'])"),
    )
    href = attr(link, "href")
    if href and "linkedin.com/redir" not in href:
        return href
    return details.get("website")


def _specialties(raw: str | None) -> list[str]:
    if not raw:
        return []
    parts = re.split(r",\s*(?:and\s+)?|\s+and\s+", raw)
    return [p for p in (clean_text(part) for part in parts) if p]


def parse_company_profile(page: object, slug: str) -> CompanyProfile:
    """Extract a CompanyProfile; missing optional fields stay empty."""
    details = _definition_pairs(page)

    top_text = " ".join(
        texts(page, "div.org-top-card-summary-info-list__info-item")
        + texts(page, "h3.top-card-layout__first-subline")
        + texts(page, "a.face-pile__cta")
    )
    employee_text = " ".join(filter(None, [details.get("employee_count_hint"), top_text]))

    about = first_text(page, ABOUT_SELECTORS)
    if not about:
        section = css_first(page, "section.org-page-details-module__card-spacing")
        about = full_text(css_first(section, "p")) if section is not None else None

    return CompanyProfile(
        name=first_text(page, NAME_SELECTORS) or "",
        slug=slug,
        tagline=first_text(page, TAGLINE_SELECTORS),
        about=about or None,
        website=_website(page, details),
        industry=details.get("industry"),
        company_size=details.get("company_size"),
        headquarters=details.get("headquarters"),
        founded=details.get("founded"),
        specialties=_specialties(details.get("specialties")),
        employee_count=extract_count(employee_text, "(?:associated\\s+)?(?:members|employees)"),
        follower_count=extract_count(top_text, "followers?"),
    )
