"""Tests for identifier extraction and URN validation."""

import pytest

from linklion.errors import ErrorKind, LinkedInError
from linklion.identifiers import (
    extract_company_slug,
    extract_job_id,
    extract_username,
    is_valid_urn,
    validate_urn,
)


class TestExtractUsername:
    def test_bare_slug(self):
        assert extract_username("john-doe") == "john-doe"

    def test_full_url_with_trailing_slash(self):
        assert extract_username("https://www.linkedin.com/in/john-doe/") == "john-doe"

    def test_url_without_www_or_scheme(self):
        assert extract_username("linkedin.com/in/jane-smith") == "jane-smith"

    def test_query_and_fragment_ignored(self):
        assert extract_username("https://www.linkedin.com/in/jane?trk=nav#top") == "jane"

    def test_surrounding_whitespace(self):
        assert extract_username("  john-doe \n") == "john-doe"

    def test_company_url_rejected(self):
        assert extract_username("https://www.linkedin.com/company/acme/") is None

    def test_bare_with_slash_or_space_rejected(self):
        assert extract_username("in/john") is None
        assert extract_username("john doe") is None

    def test_empty(self):
        assert extract_username("") is None
        assert extract_username(None) is None

    @pytest.mark.parametrize(
        "value",
        [
            "https://example.com/in/john/",
            "https://linkedin.com.evil.io/in/john/",
            "https://notlinkedin.com/in/john/",
        ],
    )
    def test_other_hosts_rejected(self, value):
        assert extract_username(value) is None

    def test_subdomain_without_scheme(self):
        assert extract_username("m.linkedin.com/in/john") == "john"
        assert extract_username("https://de.linkedin.com/in/john/") == "john"


class TestExtractCompanySlug:
    def test_bare_slug(self):
        assert extract_company_slug("anthropic") == "anthropic"

    def test_url_with_subpage(self):
        assert extract_company_slug("https://www.linkedin.com/company/anthropic/about/") == "anthropic"

    def test_profile_url_rejected(self):
        assert extract_company_slug("https://www.linkedin.com/in/john-doe/") is None


class TestExtractJobId:
    def test_bare_digits(self):
        assert extract_job_id("1234567890") == "1234567890"

    def test_view_url(self):
        assert extract_job_id("https://www.linkedin.com/jobs/view/987/") == "987"

    def test_view_url_without_scheme(self):
        assert extract_job_id("www.linkedin.com/jobs/view/42") == "42"

    def test_not_a_number(self):
        assert extract_job_id("not-a-number") is None

    def test_non_numeric_view_segment(self):
        assert extract_job_id("https://www.linkedin.com/jobs/view/abc/") is None

    def test_search_url_rejected(self):
        assert extract_job_id("https://www.linkedin.com/jobs/search/?keywords=python") is None

    def test_other_host_rejected(self):
        assert extract_job_id("https://jobs.example.com/jobs/view/987/") is None


class TestUrn:
    @pytest.mark.parametrize(
        "value",
        ["urn:li:profile:ACoAAB123", "urn:li:miniProfile:abc-def", "urn:li:profile:1"],
    )
    def test_accepts_member_urns(self, value):
        assert is_valid_urn(value)
        assert validate_urn(value) == value

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "not-a-urn",
            "urn:li:profile:",
            "urn:li:company:123",
            "li:profile:abc",
            "URN:LI:PROFILE:abc",
            " urn:li:profile:abc",
        ],
    )
    def test_rejects_everything_else(self, value):
        assert not is_valid_urn(value)

    def test_none_is_invalid(self):
        assert not is_valid_urn(None)

    def test_validate_raises_invalid_urn_with_value(self):
        with pytest.raises(LinkedInError) as exc_info:
            validate_urn("not-a-urn")
        assert exc_info.value.kind == ErrorKind.invalid_urn
        assert exc_info.value.value == "not-a-urn"
        assert "not-a-urn" in exc_info.value.message
