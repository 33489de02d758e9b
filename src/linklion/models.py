"""Record types returned by the client."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .config import BASE_URL


class RecordKind(str, Enum):
    person = "person"
    company = "company"
    job_listing = "job_listing"
    job_details = "job_details"


class _Record(BaseModel):
    # Wire/JSON names are camelCase; Python attributes stay snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Experience(_Record):
    title: str
    company: str = ""
    location: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    duration: str | None = None
    description: str | None = None


class Education(_Record):
    institution: str
    degree: str | None = None
    start_date: str | None = None
    end_date: str | None = None


class PersonProfile(_Record):
    username: str
    # Empty/placeholder names are allowed here; sufficiency is judged by
    # parsers.signal.has_primary_signal.
    name: str = ""
    headline: str | None = None
    about: str | None = None
    location: str | None = None
    company: str | None = None
    job_title: str | None = None
    experiences: list[Experience] = Field(default_factory=list)
    educations: list[Education] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    connection_count: str | None = None
    follower_count: str | None = None
    open_to_work: bool = False

    @field_validator("skills", mode="after")
    @classmethod
    def dedupe_skills(cls, v: list[str]) -> list[str]:
        out: list[str] = []
        seen: set[str] = set()
        for skill in v:
            skill = skill.strip()
            if not skill or skill in seen:
                continue
            seen.add(skill)
            out.append(skill)
        return out

    @property
    def profile_url(self) -> str:
        return f"{BASE_URL}/in/{self.username}/"


class CompanyProfile(_Record):
    name: str = ""
    slug: str
    tagline: str | None = None
    about: str | None = None
    website: str | None = None
    industry: str | None = None
    company_size: str | None = None
    headquarters: str | None = None
    founded: str | None = None
    specialties: list[str] = Field(default_factory=list)
    employee_count: str | None = None
    follower_count: str | None = None

    @property
    def company_url(self) -> str:
        return f"{BASE_URL}/company/{self.slug}/"


def job_url_for(job_id: str) -> str:
    return f"{BASE_URL}/jobs/view/{job_id}/"


class JobListing(_Record):
    id: str
    title: str = ""
    company: str = ""
    location: str | None = None
    posted_date: str | None = None
    salary: str | None = None
    is_easy_apply: bool = False
    job_url: str = Field(default="", alias="jobURL")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> object:
        if isinstance(v, int):
            return str(v)
        return v

    def model_post_init(self, __context: object) -> None:
        if not self.job_url:
            self.job_url = job_url_for(self.id)

    @property
    def dedup_key(self) -> str:
        return self.id


class JobDetails(JobListing):
    description: str | None = None
    workplace_type: str | None = None
    employment_type: str | None = None
    experience_level: str | None = None
    applicant_count: str | None = None
    skills: list[str] = Field(default_factory=list)


class AuthStatus(_Record):
    valid: bool
    message: str


class WriteResult(_Record):
    success: bool
    status_code: int
    message: str = ""


RECORD_TYPES: dict[RecordKind, type[_Record]] = {
    RecordKind.person: PersonProfile,
    RecordKind.company: CompanyProfile,
    RecordKind.job_listing: JobListing,
    RecordKind.job_details: JobDetails,
}
