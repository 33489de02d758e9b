"""Parsers for job search result pages and single job postings."""

from __future__ import annotations

import logging
import re

from ..models import JobDetails, JobListing
from .common import (
    attr,
    clean_text,
    css_first,
    first_text,
    full_text,
    safe_css,
    texts,
)

logger = logging.getLogger(__name__)

_JOB_HREF_RE = re.compile(r"/jobs/view/(?:[^/?#]*?-)?(\d+)")
_URN_ID_RE = re.compile(r"(?:jobPosting|fs_normalized_jobPosting):(\d+)")
_SALARY_RE = re.compile(
    r"[$€£]\s?\d[\d,.]*\s?[Kk]?(?:/(?:yr|hr|mo))?"
    r"(?:\s*[-–]\s*[$€£]?\s?\d[\d,.]*\s?[Kk]?(?:/(?:yr|hr|mo))?)?"
)
_APPLICANTS_RE = re.compile(r"((?:over\s+)?\d[\d,]*\+?)\s+(?:people\s+clicked\s+apply|applicants?)", re.IGNORECASE)
_WORKPLACE_RE = re.compile(r"\b(Remote|Hybrid|On-site)\b", re.IGNORECASE)
_EMPLOYMENT_RE = re.compile(r"\b(Full-time|Part-time|Contract|Temporary|Internship|Volunteer)\b", re.IGNORECASE)
_LEVEL_RE = re.compile(r"\b(Internship|Entry level|Associate|Mid-Senior level|Director|Executive)\b", re.IGNORECASE)
_POSTED_RE = re.compile(r"\b(?:Reposted\s+)?\d+\s+(?:minute|hour|day|week|month|year)s?\s+ago\b", re.IGNORECASE)

TITLE_SELECTORS = (
    "a.job-card-list__title strong",
    "a.job-card-list__title--link strong",
    "a.job-card-list__title",
    "a.job-card-container__link span[aria-hidden='true']",
    "h3.base-search-card__title",
    "a[href*='/jobs/view/'] strong",
    "a[href*='/jobs/view/']",
)
COMPANY_SELECTORS = (
    "div.artdeco-entity-lockup__subtitle",
    "span.job-card-container__primary-description",
    "h4.base-search-card__subtitle",
    "a.job-card-container__company-name",
)
LOCATION_SELECTORS = (
    "ul.job-card-container__metadata-wrapper li",
    "li.job-card-container__metadata-item",
    "div.artdeco-entity-lockup__caption",
    "span.job-search-card__location",
)


def _canonical_title(value: str | None) -> str | None:
    """Cards often repeat the title twice ("X X"); keep one copy."""
    text = clean_text(value)
    if not text:
        return None
    half, rem = divmod(len(text), 2)
    if rem and text[:half] == text[half + 1:] and text[half] == " ":
        return text[:half]
    return text


def _job_id_for(card: object) -> str | None:
    for name in ("data-occludable-job-id", "data-job-id"):
        value = attr(card, name)
        if value and value.isdigit():
            return value
    urn = attr(card, "data-entity-urn")
    if urn:
        m = _URN_ID_RE.search(urn)
        if m:
            return m.group(1)
    for name in ("data-job-id", "data-occludable-job-id"):
        inner = css_first(card, f"[{name}]")
        value = attr(inner, name)
        if value and value.isdigit():
            return value
    href = attr(card, "href") or attr(css_first(card, "a[href*='/jobs/view/']"), "href")
    if href:
        m = _JOB_HREF_RE.search(href)
        if m:
            return m.group(1)
    return None


# ── Search results ────────────────────────────────────────────────────────

def _find_job_cards(page: object) -> list:
    """Try multiple selectors to find job cards."""
    strategies = [
        ("li[data-occludable-job-id]", "occludable list item"),
        ("div.job-card-container[data-job-id]", "job card container"),
        ("div.base-card[data-entity-urn*='jobPosting']", "guest base card"),
        ("a[href*='/jobs/view/']", "job view links"),
    ]
    for selector, label in strategies:
        cards = safe_css(page, selector)
        if cards:
            logger.debug("Job cards via %s: %d", label, len(cards))
            return cards
    return []


def _parse_job_card(card: object) -> JobListing | None:
    job_id = _job_id_for(card)
    if not job_id:
        return None

    if getattr(card, "tag", "") == "a":
        title = _canonical_title(first_text(card, ("strong", "span[aria-hidden='true']")) or full_text(card))
    else:
        title = _canonical_title(first_text(card, TITLE_SELECTORS))
    if not title:
        return None

    blob = full_text(card)
    posted = full_text(css_first(card, "time")) or None
    if not posted:
        m = _POSTED_RE.search(blob)
        posted = m.group(0) if m else None
    salary = first_text(card, ("span.job-search-card__salary-info",))
    if not salary:
        m = _SALARY_RE.search(blob)
        salary = clean_text(m.group(0)) if m else None

    return JobListing(
        id=job_id,
        title=title,
        company=first_text(card, COMPANY_SELECTORS) or "",
        location=first_text(card, LOCATION_SELECTORS),
        posted_date=posted,
        salary=salary,
        is_easy_apply="easy apply" in blob.lower(),
    )


def parse_job_search(page: object, limit: int) -> list[JobListing]:
    """Job cards in document order, deduplicated by id, at most *limit*."""
    cards = _find_job_cards(page)
    if not cards:
        logger.info("No job cards found on search page")
        return []

    jobs: list[JobListing] = []
    seen: set[str] = set()
    for card in cards:
        if len(jobs) >= limit:
            break
        try:
            job = _parse_job_card(card)
        except Exception:
            logger.debug("Failed to parse a job card", exc_info=True)
            continue
        if job is None:
            logger.debug("Job card skipped: no id or title")
            continue
        if job.dedup_key in seen:
            continue
        seen.add(job.dedup_key)
        jobs.append(job)

    logger.info("Parsed %d job cards", len(jobs))
    return jobs


# ── Job posting ───────────────────────────────────────────────────────────

DETAIL_TITLE_SELECTORS = (
    "h1.job-details-jobs-unified-top-card__job-title",
    "h1.jobs-unified-top-card__job-title",
    "h1.top-card-layout__title",
    "h1.t-24",
    "h1",
)
DETAIL_COMPANY_SELECTORS = (
    "div.job-details-jobs-unified-top-card__company-name a",
    "div.job-details-jobs-unified-top-card__company-name",
    "a.topcard__org-name-link",
    "span.topcard__flavor a",
    "span.topcard__flavor",
)
DESCRIPTION_SELECTORS = (
    "div.jobs-description__content",
    "div#job-details",
    "div.show-more-less-html__markup",
    "div.description__text",
)


def _criteria(page: object) -> dict[str, str]:
    """Guest pages list Seniority level / Employment type as labelled items."""
    out: dict[str, str] = {}
    for item in safe_css(page, "li.description__job-criteria-item"):
        label = (first_text(item, ("h3",)) or "").lower()
        value = first_text(item, ("span",))
        if label and value:
            out[label] = value
    return out


def _first_match(pattern: re.Pattern[str], *blobs: str) -> str | None:
    for blob in blobs:
        if not blob:
            continue
        m = pattern.search(blob)
        if m:
            return m.group(1)
    return None


def _detail_skills(page: object) -> list[str]:
    skills: list[str] = []
    for text in texts(page, "a.job-details-how-you-match__skills-item-subtitle"):
        for part in re.split(r",\s*(?:and\s+)?|\s+and\s+", text):
            part = clean_text(part)
            if part and not re.match(r"^\+?\d+\s+more$", part, re.IGNORECASE):
                skills.append(part)
    if not skills:
        skills = texts(page, "li.job-details-skill-match-status-list__matched-skill div[aria-label]")
    return skills


def parse_job_details(page: object, job_id: str) -> JobDetails:
    """Extract a single posting. Missing optional fields stay empty."""
    criteria = _criteria(page)
    top = " ".join(
        texts(page, "div.job-details-jobs-unified-top-card__tertiary-description-container")
        + texts(page, "div.job-details-jobs-unified-top-card__primary-description-container")
        + texts(page, "div.topcard__flavor-row")
    )
    insights = " ".join(
        texts(page, "li.job-details-jobs-unified-top-card__job-insight")
        + texts(page, "div.job-details-preferences-and-skills")
        + texts(page, "div.job-details-fit-level-preferences button")
    )

    location = first_text(page, ("span.topcard__flavor--bullet",))
    if not location and top:
        location = clean_text(top.split("·", 1)[0])

    posted = first_text(page, ("span.posted-time-ago__text",))
    if not posted:
        m = _POSTED_RE.search(top)
        posted = m.group(0) if m else None

    applicants = first_text(page, ("figcaption.num-applicants__caption", "span.num-applicants__caption"))
    applicant_count = _first_match(_APPLICANTS_RE, applicants or "", top)

    salary = first_text(page, ("div.salary.compensation__salary", "div.compensation__salary"))
    if not salary:
        m = _SALARY_RE.search(insights) or _SALARY_RE.search(top)
        salary = clean_text(m.group(0)) if m else None

    apply_text = " ".join(texts(page, "button.jobs-apply-button") + texts(page, "button[data-tracking-control-name*='apply']"))

    return JobDetails(
        id=job_id,
        title=first_text(page, DETAIL_TITLE_SELECTORS) or "",
        company=first_text(page, DETAIL_COMPANY_SELECTORS) or "",
        location=location,
        posted_date=posted,
        salary=salary,
        is_easy_apply="easy apply" in apply_text.lower(),
        description=first_text(page, DESCRIPTION_SELECTORS),
        workplace_type=_first_match(_WORKPLACE_RE, insights, top),
        employment_type=criteria.get("employment type") or _first_match(_EMPLOYMENT_RE, insights),
        experience_level=criteria.get("seniority level") or _first_match(_LEVEL_RE, insights),
        applicant_count=applicant_count,
        skills=_detail_skills(page),
    )
