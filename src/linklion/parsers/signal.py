"""Sufficiency check deciding whether a parsed record is usable."""

from __future__ import annotations

from ..models import CompanyProfile, JobListing, PersonProfile

# Names LinkedIn renders on sign-in walls and stub pages in place of the
# real subject.
PLACEHOLDER_NAMES = frozenset(
    {
        "linkedin",
        "linkedin member",
        "sign in",
        "join linkedin",
        "sign up",
        "log in",
    }
)


def primary_field(record: object) -> str:
    """The field a record is identified by: a name or a job title."""
    if isinstance(record, (PersonProfile, CompanyProfile)):
        return record.name
    if isinstance(record, JobListing):
        return record.title
    raise TypeError(f"Unsupported record type: {type(record).__name__}")


def has_primary_signal(record: object) -> bool:
    value = (primary_field(record) or "").strip()
    if not value:
        return False
    return value.lower() not in PLACEHOLDER_NAMES
