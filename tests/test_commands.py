"""Tests for command validation and dispatch."""

import asyncio

import httpx
import pytest
from pydantic import ValidationError

from linklion.auth.session_manager import SessionManager
from linklion.client import LinkedInClient
from linklion.commands import (
    GetProfileCommand,
    SearchJobsCommand,
    SendMessageCommand,
    StatusCommand,
    execute,
    parse_command,
)
from linklion.fetcher import HttpTransport

SEARCH_HTML = """
<ul>
  <li data-occludable-job-id="7"><a class="job-card-list__title" href="/jobs/view/7/">Engineer</a></li>
</ul>
"""


class TestParseCommand:
    def test_discriminates_on_command(self):
        command = parse_command({"command": "get_profile", "username": " jane "})
        assert isinstance(command, GetProfileCommand)
        assert command.username == "jane"

    def test_search_defaults(self):
        command = parse_command({"command": "search_jobs", "query": "python"})
        assert isinstance(command, SearchJobsCommand)
        assert command.limit == 25
        assert command.location is None

    @pytest.mark.parametrize("limit", [0, 101])
    def test_search_limit_bounds(self, limit):
        with pytest.raises(ValidationError):
            parse_command({"command": "search_jobs", "query": "python", "limit": limit})

    def test_unknown_command(self):
        with pytest.raises(ValidationError):
            parse_command({"command": "delete_account"})

    def test_extra_fields_rejected(self):
        with pytest.raises(ValidationError):
            parse_command({"command": "status", "verbose": True})

    def test_missing_required_field(self):
        with pytest.raises(ValidationError):
            parse_command({"command": "get_job"})

    def test_empty_message_text(self):
        with pytest.raises(ValidationError):
            parse_command({"command": "send_message", "urn": "urn:li:profile:a", "text": "  "})

    def test_status(self):
        assert isinstance(parse_command({"command": "status"}), StatusCommand)


def _execute(command, html: str = "", status: int = 200, cookie: str | None = "tok"):
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(status, text=html)

    async def run():
        client = LinkedInClient(
            session=SessionManager(cookie),
            transport=HttpTransport(transport=httpx.MockTransport(handler)),
        )
        async with client:
            return await execute(client, command)

    return asyncio.run(run()), calls


class TestExecute:
    def test_status(self):
        result, _ = _execute(StatusCommand(), html="feed")
        assert result == {"configured": True, "status": "connected", "valid": True, "message": "Authenticated"}

    def test_status_unconfigured(self):
        result, calls = _execute(StatusCommand(), cookie=None)
        assert result["configured"] is False
        assert result["valid"] is False
        assert calls == []

    def test_configure_then_verify(self):
        result, calls = _execute(parse_command({"command": "configure", "cookie": "li_at=new"}), html="feed")
        assert result["configured"] is True
        assert calls[0].headers["cookie"] == "li_at=new"

    def test_search_result_shape(self):
        result, _ = _execute(SearchJobsCommand(query="python", limit=5), html=SEARCH_HTML)
        assert result["query"] == "python"
        assert result["count"] == 1
        assert result["jobs"][0]["id"] == "7"
        assert result["jobs"][0]["jobURL"] == "https://www.linkedin.com/jobs/view/7/"
        assert "isEasyApply" in result["jobs"][0]

    def test_profile_uses_camel_case_keys(self):
        html = "<html><body><main><section><h1>Jane Doe</h1></section></main></body></html>"
        result, _ = _execute(GetProfileCommand(username="jane"), html=html)
        assert result["name"] == "Jane Doe"
        assert result["openToWork"] is False
        assert "jobTitle" in result

    def test_send_message(self):
        result, calls = _execute(SendMessageCommand(urn="urn:li:profile:a", text="Hi"), status=201)
        assert result == {"success": True, "statusCode": 201, "message": "Message sent"}
        assert calls[0].method == "POST"
