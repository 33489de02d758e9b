"""Tests for session cookie handling and the auth probe."""

import asyncio

import httpx
import pytest

from linklion.auth.secret_store import FileSecretStore
from linklion.auth.session_manager import SessionManager, SessionStatus, strip_cookie_prefix
from linklion.errors import ErrorKind, LinkedInError
from linklion.fetcher import HttpTransport


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("li_at=AQEDAR", "AQEDAR"),
        ("AQEDAR", "AQEDAR"),
        ("  li_at=AQEDAR \n", "AQEDAR"),
        ("li_at=li_at=x", "li_at=x"),
    ],
)
def test_strip_cookie_prefix(raw, expected):
    assert strip_cookie_prefix(raw) == expected


def test_configure_stores_bare_token():
    async def run():
        session = SessionManager()
        assert not session.is_configured
        await session.configure("li_at=secret")
        return session, await session.token(), await session.cookie_header()

    session, token, header = asyncio.run(run())
    assert session.is_configured
    assert token == "secret"
    assert header == "li_at=secret"


def test_configure_rejects_empty_cookie():
    with pytest.raises(LinkedInError) as exc_info:
        asyncio.run(SessionManager().configure("li_at="))
    assert exc_info.value.kind == ErrorKind.not_authenticated


def test_token_without_configuration():
    with pytest.raises(LinkedInError) as exc_info:
        asyncio.run(SessionManager().token())
    assert exc_info.value.kind == ErrorKind.not_authenticated


def test_concurrent_configure_and_reads_see_whole_tokens():
    async def run():
        session = SessionManager("start")
        tokens = [f"token-{i}" for i in range(20)]
        results = await asyncio.gather(
            *(session.configure(t) for t in tokens),
            *(session.token() for _ in range(20)),
        )
        return tokens, [r for r in results if r is not None], await session.token()

    tokens, reads, final = asyncio.run(run())
    assert all(r == "start" or r in tokens for r in reads)
    assert final in tokens


def _probe(handler, cookie: str | None = "tok") -> tuple:
    calls: list[httpx.Request] = []

    def counting(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    async def run():
        session = SessionManager(cookie)
        transport = HttpTransport(transport=httpx.MockTransport(counting))
        try:
            status = await session.verify(transport)
        finally:
            await transport.aclose()
        return session, status

    session, status = asyncio.run(run())
    return session, status, calls


class TestVerify:
    def test_authenticated(self):
        session, status, calls = _probe(lambda r: httpx.Response(200, text="feed"))
        assert status.valid is True
        assert status.message == "Authenticated"
        assert session.status == SessionStatus.connected
        assert calls[0].url.path == "/feed/"
        assert calls[0].headers["cookie"] == "li_at=tok"

    def test_redirect_to_login_means_expired(self):
        def handler(request):
            if request.url.path == "/feed/":
                return httpx.Response(302, headers={"Location": "https://www.linkedin.com/login"})
            return httpx.Response(200, text="login")

        session, status, _ = _probe(handler)
        assert status.valid is False
        assert status.message == "Cookie expired or invalid"
        assert session.status == SessionStatus.expired

    def test_other_status(self):
        _, status, _ = _probe(lambda r: httpx.Response(503))
        assert (status.valid, status.message) == (False, "HTTP 503")

    def test_no_cookie_makes_no_request(self):
        session, status, calls = _probe(lambda r: httpx.Response(200), cookie=None)
        assert (status.valid, status.message) == (False, "No cookie configured")
        assert calls == []
        assert session.status == SessionStatus.unknown


class TestFileSecretStore:
    def test_save_strips_prefix_and_restricts_mode(self, tmp_path):
        store = FileSecretStore(tmp_path / "secrets" / "li_at")
        store.save("li_at=AQEDAR")
        assert store.load() == "AQEDAR"
        assert store.has_token()
        assert (store.path.stat().st_mode & 0o777) == 0o600

    def test_load_missing(self, tmp_path):
        assert FileSecretStore(tmp_path / "missing").load() is None

    def test_delete_is_idempotent(self, tmp_path):
        store = FileSecretStore(tmp_path / "li_at")
        store.save("x")
        store.delete()
        store.delete()
        assert store.load() is None
        assert not store.has_token()

    def test_save_rejects_empty(self, tmp_path):
        with pytest.raises(ValueError):
            FileSecretStore(tmp_path / "li_at").save("li_at=")
