"""Tests for response classification and authenticated fetches."""

import asyncio

import httpx
import pytest

from linklion.auth.session_manager import SessionManager
from linklion.errors import ErrorKind, LinkedInError
from linklion.fetcher import (
    BROWSER_HEADERS,
    HttpTransport,
    TransportResponse,
    classify_read_response,
    fetch_document,
    job_search_url,
    job_url,
    profile_url,
)


def _kind(response: TransportResponse) -> ErrorKind:
    with pytest.raises(LinkedInError) as exc_info:
        classify_read_response(response)
    return exc_info.value.kind


class TestClassifyReadResponse:
    def test_login_path_even_with_200(self):
        response = TransportResponse(200, "https://www.linkedin.com/login?session_redirect=x", b"<html></html>")
        assert _kind(response) == ErrorKind.not_authenticated

    def test_uas_login_path(self):
        response = TransportResponse(200, "https://www.linkedin.com/uas/login", b"")
        assert _kind(response) == ErrorKind.not_authenticated

    def test_checkpoint_path(self):
        response = TransportResponse(200, "https://www.linkedin.com/checkpoint/challenge/abc", b"")
        assert _kind(response) == ErrorKind.security_challenge

    def test_non_200_status(self):
        with pytest.raises(LinkedInError) as exc_info:
            classify_read_response(TransportResponse(500, "https://www.linkedin.com/in/jane/"))
        assert exc_info.value == LinkedInError.http_error(500)

    def test_404_is_http_error(self):
        assert _kind(TransportResponse(404, "https://www.linkedin.com/in/nobody/")) == ErrorKind.http_error

    def test_invalid_utf8(self):
        response = TransportResponse(200, "https://www.linkedin.com/in/jane/", b"\xff\xfe\xfa")
        assert _kind(response) == ErrorKind.invalid_response

    def test_ok_returns_text(self):
        response = TransportResponse(200, "https://www.linkedin.com/in/jane/", "<h1>Jöhn</h1>".encode())
        assert classify_read_response(response) == "<h1>Jöhn</h1>"

    def test_login_in_query_string_does_not_count(self):
        response = TransportResponse(200, "https://www.linkedin.com/in/jane/?from=login", b"ok")
        assert classify_read_response(response) == "ok"


def test_fetch_document_sends_cookie_and_browser_headers():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="<html><body><h1>Jane</h1></body></html>")

    async def run():
        transport = HttpTransport(transport=httpx.MockTransport(handler))
        try:
            return await fetch_document(profile_url("jane"), SessionManager("li_at=tok123"), transport)
        finally:
            await transport.aclose()

    doc = asyncio.run(run())
    assert doc.status == 200
    assert doc.url == "https://www.linkedin.com/in/jane/"
    assert doc.page.css_first("h1").text == "Jane"

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "GET"
    assert request.headers["cookie"] == "li_at=tok123"
    for name, value in BROWSER_HEADERS.items():
        assert request.headers[name] == value


def test_fetch_document_follows_redirect_to_login():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/in/jane/":
            return httpx.Response(302, headers={"Location": "https://www.linkedin.com/login?trk=x"})
        return httpx.Response(200, text="<html>sign in</html>")

    async def run():
        transport = HttpTransport(transport=httpx.MockTransport(handler))
        try:
            await fetch_document(profile_url("jane"), SessionManager("tok"), transport)
        finally:
            await transport.aclose()

    with pytest.raises(LinkedInError) as exc_info:
        asyncio.run(run())
    assert exc_info.value.kind == ErrorKind.not_authenticated


def test_fetch_without_token_makes_no_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, text="ok")

    async def run():
        transport = HttpTransport(transport=httpx.MockTransport(handler))
        try:
            await fetch_document(profile_url("jane"), SessionManager(), transport)
        finally:
            await transport.aclose()

    with pytest.raises(LinkedInError) as exc_info:
        asyncio.run(run())
    assert exc_info.value.kind == ErrorKind.not_authenticated
    assert calls == []


def test_network_failure_is_invalid_response():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        transport = HttpTransport(transport=httpx.MockTransport(handler))
        try:
            await transport.get(profile_url("jane"), headers={})
        finally:
            await transport.aclose()

    with pytest.raises(LinkedInError) as exc_info:
        asyncio.run(run())
    assert exc_info.value.kind == ErrorKind.invalid_response


def test_resource_urls():
    assert profile_url("jane") == "https://www.linkedin.com/in/jane/"
    assert job_url("123") == "https://www.linkedin.com/jobs/view/123/"
    assert job_search_url("python developer") == (
        "https://www.linkedin.com/jobs/search/?keywords=python+developer&refresh=true"
    )
    assert job_search_url("go", "Berlin, Germany") == (
        "https://www.linkedin.com/jobs/search/?keywords=go&refresh=true&location=Berlin%2C+Germany"
    )
