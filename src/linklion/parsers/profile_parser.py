"""Best-effort parsing of LinkedIn person profile pages."""

from __future__ import annotations

import logging
import re

from ..models import Education, Experience, PersonProfile
from .common import (
    attr,
    clean_text,
    css_first,
    dedupe,
    extract_count,
    first_node,
    first_text,
    full_text,
    looks_like_date_range,
    safe_css,
    split_date_range,
    split_title_company,
    texts,
)

logger = logging.getLogger(__name__)

SECTION_HINT_ALIASES: dict[str, tuple[str, ...]] = {
    "about": ("about",),
    "experience": ("experience",),
    "education": ("education",),
    "skills": ("skills",),
}

NAME_SELECTORS = (
    "h1.text-heading-xlarge",
    "h1.top-card-layout__title",
    "main section h1",
    "h1",
)
HEADLINE_SELECTORS = (
    "main section div.text-body-medium",
    "main div.ph5 div.text-body-medium",
    "h2.top-card-layout__headline",
    "section div.text-body-medium",
)
LOCATION_SELECTORS = (
    "main section span.text-body-small.inline.t-black--light.break-words",
    "main div.ph5 span.text-body-small",
    "div.top-card__subline-item",
    "h3.top-card-layout__first-subline span",
    "section span.text-body-small",
)
ABOUT_SELECTORS = (
    "section.summary div.core-section-container__content p",
    "section.summary p",
    "div.pv-about__summary-text",
)

_OPEN_TO_WORK_MARKERS = ("#OPEN_TO_WORK", "open to work", "opentowork")
_MAX_ITEMS = 50


# ── Section lookup ────────────────────────────────────────────────────────

def _aliases_for_hint(section_hint: str) -> tuple[str, ...]:
    hint = (section_hint or "").strip().lower()
    if hint in SECTION_HINT_ALIASES:
        return SECTION_HINT_ALIASES[hint]
    return (hint,) if hint else ()


def _section_matches_hint(section: object, *, section_hint: str) -> bool:
    aliases = _aliases_for_hint(section_hint)
    if not aliases:
        return False

    for alias in aliases:
        safe = alias.replace("&", "and").replace(" ", "-")
        if safe_css(section, f"#{safe}"):
            return True

    attrs = ""
    if hasattr(section, "attrib"):
        attrs = " ".join(str(v) for v in section.attrib.values()).lower()
    if any(alias.replace(" ", "") in attrs.replace(" ", "") for alias in aliases):
        return True

    # Newer pages drop stable ids; fall back to the section heading.
    heading = first_text(section, ("h2", "h3", "div.pvs-header__title"))
    head = re.sub(r"[^a-z0-9]+", " ", (heading or "").lower()).strip()
    return any(head == alias or head.startswith(f"{alias} ") for alias in aliases)


def _find_section(page: object, section_hint: str) -> object | None:
    sections = safe_css(page, "main section") or safe_css(page, "section")
    for section in sections:
        if _section_matches_hint(section, section_hint=section_hint):
            return section
    return None


def _section_items(section: object) -> list:
    for selector in (
        "li.artdeco-list__item",
        "li.pvs-list__paged-list-item",
        "li.experience-item",
        "li.education__list-item",
        "li.profile-section-card",
        "li",
    ):
        items = safe_css(section, selector)
        if items:
            return items[:_MAX_ITEMS]
    return []


def _visible_lines(item: object) -> list[str]:
    """Visible text fragments of a list item in reading order."""
    lines = texts(item, "span[aria-hidden='true']")
    if not lines:
        lines = texts(item, "h3, h4, span, p")
    return dedupe(lines)


# ── Field parsers ─────────────────────────────────────────────────────────

def parse_profile_summary(page: object) -> dict:
    """Extract top-of-profile summary fields."""
    return {
        "name": first_text(page, NAME_SELECTORS),
        "headline": first_text(page, HEADLINE_SELECTORS),
        "location": first_text(page, LOCATION_SELECTORS),
    }


def parse_about_text(page: object, *, max_chars: int = 4000) -> str | None:
    """Extract profile About section text."""
    text = first_text(page, ABOUT_SELECTORS)
    if text and len(text) > 20:
        return text[:max_chars]

    section = _find_section(page, "about")
    if section is None:
        return None
    for selector in ("div.inline-show-more-text span[aria-hidden='true']", "div.inline-show-more-text", "div[dir='ltr']"):
        text = full_text(css_first(section, selector))
        if text and len(text) > 20:
            return text[:max_chars]

    txt = full_text(section)
    cleaned = re.sub(r"^about\s*", "", txt, flags=re.IGNORECASE).strip()
    return cleaned[:max_chars] if cleaned else None


def _parse_guest_experience(item: object) -> Experience | None:
    title = first_text(item, ("h3", "span.experience-item__title"))
    if not title:
        return None
    start = end = duration = None
    date_el = css_first(item, "span.date-range")
    if date_el is not None:
        times = texts(date_el, "time")
        start = times[0] if times else None
        end = times[1] if len(times) > 1 else None
        duration = first_text(date_el, ("span.before\\:middot",)) or None
        if not start:
            start, end, duration = split_date_range(full_text(date_el))
    return Experience(
        title=title,
        company=first_text(item, ("h4", "span.experience-item__subtitle")) or "",
        location=first_text(item, ("p.experience-item__location", "p.experience-item__meta-item + p")),
        start_date=start,
        end_date=end,
        duration=duration,
        description=first_text(item, ("div.show-more-less-text", "p.show-more-less-text__text--less")),
    )


def _parse_experience_item(item: object) -> Experience | None:
    if css_first(item, "span.date-range") is not None:
        return _parse_guest_experience(item)

    lines = _visible_lines(item)
    if not lines:
        return None

    title = lines[0]
    company = ""
    start = end = duration = location = description = None
    rest = lines[1:]
    for line in rest:
        if start is None and looks_like_date_range(line):
            start, end, duration = split_date_range(line)
        elif not company and start is None:
            company = clean_text(line.split(" · ", 1)[0]) or ""
        elif location is None and start is not None and len(line) <= 80 and len(line.split()) <= 8:
            location = line
        elif len(line) > 40:
            description = line if description is None else description

    desc_el = first_node(item, ("div.inline-show-more-text", "div.pvs-entity__description"))
    if desc_el is not None:
        description = full_text(desc_el) or description

    return Experience(
        title=title,
        company=company,
        location=location,
        start_date=start,
        end_date=end,
        duration=duration,
        description=description,
    )


def _parse_education_item(item: object) -> Education | None:
    lines = _visible_lines(item)
    if css_first(item, "span.date-range") is not None or css_first(item, "h3") is not None and not safe_css(item, "span[aria-hidden='true']"):
        institution = first_text(item, ("h3",))
        degree_parts = texts(item, "h4 span") or texts(item, "h4")
        degree = clean_text(", ".join(degree_parts)) if degree_parts else None
        date_text = first_text(item, ("span.date-range",))
        start, end, _ = split_date_range(date_text)
        if not institution:
            return None
        return Education(institution=institution, degree=degree, start_date=start, end_date=end)

    if not lines:
        return None
    institution = lines[0]
    degree = None
    start = end = None
    for line in lines[1:]:
        if start is None and re.search(r"\b(19|20)\d{2}\b", line):
            start, end, _ = split_date_range(line)
        elif degree is None and start is None:
            degree = line
    return Education(institution=institution, degree=degree, start_date=start, end_date=end)


def parse_experiences(page: object) -> list[Experience]:
    section = _find_section(page, "experience")
    if section is None:
        return []
    out: list[Experience] = []
    for item in _section_items(section):
        try:
            exp = _parse_experience_item(item)
            if exp:
                out.append(exp)
        except Exception:
            logger.debug("Failed to parse an experience item", exc_info=True)
    return out


def parse_educations(page: object) -> list[Education]:
    section = _find_section(page, "education")
    if section is None:
        return []
    out: list[Education] = []
    for item in _section_items(section):
        try:
            edu = _parse_education_item(item)
            if edu:
                out.append(edu)
        except Exception:
            logger.debug("Failed to parse an education item", exc_info=True)
    return out


def parse_skills(page: object) -> list[str]:
    section = _find_section(page, "skills")
    if section is None:
        return []
    skills: list[str] = []
    for item in _section_items(section):
        lines = _visible_lines(item)
        if lines and len(lines[0]) <= 80:
            skills.append(lines[0])
    return dedupe(skills)


def parse_open_to_work(page: object) -> bool:
    for img in safe_css(page, "img[alt]"):
        alt = (attr(img, "alt") or "").lower()
        if "open_to_work" in alt or "open to work" in alt:
            return True
    top = css_first(page, "main section")
    if top is None:
        top = page
    blob = full_text(top).lower()
    return any(marker.lower() in blob for marker in _OPEN_TO_WORK_MARKERS)


def _top_card_text(page: object) -> str:
    parts = texts(page, "ul.pv-top-card--list li") + texts(page, "li.text-body-small")
    parts += texts(page, "div.top-card-layout__entity-info span") + texts(page, "span.top-card__subline-item")
    if not parts:
        top = css_first(page, "main section")
        if top is not None:
            parts.append(full_text(top))
    return " ".join(parts)


def parse_person_profile(page: object, username: str) -> PersonProfile:
    """Extract a PersonProfile; never raises for missing optional fields."""
    summary = parse_profile_summary(page)
    experiences = parse_experiences(page)
    headline = summary["headline"]

    job_title, company = None, None
    if experiences:
        job_title = experiences[0].title
        company = experiences[0].company or None
    if not job_title and headline:
        job_title, company = split_title_company(headline)

    counts_text = _top_card_text(page)

    return PersonProfile(
        username=username,
        name=summary["name"] or "",
        headline=headline,
        about=parse_about_text(page),
        location=summary["location"],
        company=company,
        job_title=job_title,
        experiences=experiences,
        educations=parse_educations(page),
        skills=parse_skills(page),
        connection_count=extract_count(counts_text, "connections?"),
        follower_count=extract_count(counts_text, "followers?"),
        open_to_work=parse_open_to_work(page),
    )
