"""Tests for the linklion command line."""

import io
import json

import httpx
import pytest

from linklion import cli
from linklion.auth.secret_store import FileSecretStore
from linklion.auth.session_manager import SessionManager
from linklion.client import LinkedInClient
from linklion.fetcher import HttpTransport

PROFILE_HTML = """
<html><body><main><section>
  <h1>Jane Doe</h1>
  <div class="text-body-medium">Staff Engineer at Acme</div>
</section></main></body></html>
"""


@pytest.fixture
def env(tmp_path, monkeypatch):
    """Isolated secret store plus a client factory backed by a MockTransport."""
    store = FileSecretStore(tmp_path / "li_at")
    state = {"html": PROFILE_HTML, "status": 200, "calls": [], "cookies": []}

    def handler(request: httpx.Request) -> httpx.Response:
        state["calls"].append(request)
        return httpx.Response(state["status"], text=state["html"])

    class _Factory:
        @staticmethod
        def from_env(cookie=None):
            state["cookies"].append(cookie)
            return LinkedInClient(
                session=SessionManager(cookie),
                transport=HttpTransport(transport=httpx.MockTransport(handler)),
            )

    monkeypatch.setattr(cli, "ensure_dirs", lambda: None)
    monkeypatch.setattr(cli, "FileSecretStore", lambda: store)
    monkeypatch.setattr(cli, "LinkedInClient", _Factory)
    state["store"] = store
    return state


def test_no_command_prints_help(env, capsys):
    assert cli.main([]) == 0
    assert "usage: linklion" in capsys.readouterr().out


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--version"])
    assert exc_info.value.code == 0
    assert "linklion 0.1.0" in capsys.readouterr().out


class TestAuth:
    def test_save_and_verify(self, env, capsys):
        env["html"] = "feed"
        assert cli.main(["auth", "li_at=AQEDAR"]) == 0
        out = capsys.readouterr().out
        assert "Cookie saved" in out
        assert "Authentication verified" in out
        assert env["store"].load() == "AQEDAR"

    def test_show_and_clear(self, env, capsys):
        env["store"].save("secret")
        assert cli.main(["auth", "--show"]) == 0
        assert "secret" in capsys.readouterr().out
        assert cli.main(["auth", "--clear"]) == 0
        assert env["store"].load() is None

    def test_interactive_cancel(self, env, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("\n"))
        assert cli.main(["auth"]) == 1
        assert "Authentication cancelled" in capsys.readouterr().out


class TestReads:
    def test_profile_text(self, env, capsys):
        env["store"].save("tok")
        assert cli.main(["profile", "https://www.linkedin.com/in/jane/"]) == 0
        out = capsys.readouterr().out
        assert "Jane Doe" in out
        assert "Staff Engineer at Acme" in out
        assert env["cookies"] == ["tok"]

    def test_profile_json(self, env, capsys):
        env["store"].save("tok")
        assert cli.main(["--json", "profile", "jane"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["name"] == "Jane Doe"
        assert data["jobTitle"] == "Staff Engineer"
        assert data["company"] == "Acme"

    def test_cookie_flag_overrides_store(self, env, capsys):
        env["store"].save("stored")
        cli.main(["--cookie", "override", "profile", "jane"])
        assert env["calls"][0].headers["cookie"] == "li_at=override"

    def test_unauthenticated(self, env, capsys):
        assert cli.main(["profile", "jane"]) == 1
        assert "not_authenticated:" in capsys.readouterr().err
        assert env["calls"] == []

    def test_http_error(self, env, capsys):
        env["store"].save("tok")
        env["status"] = 500
        assert cli.main(["company", "acme"]) == 1
        assert "http_error: HTTP error: 500" in capsys.readouterr().err

    def test_invalid_identifier(self, env, capsys):
        env["store"].save("tok")
        assert cli.main(["job", "not-a-number"]) == 1
        assert "invalid_identifier:" in capsys.readouterr().err

    def test_jobs_limit_out_of_range(self, env, capsys):
        assert cli.main(["jobs", "python", "-n", "0"]) == 1
        err = capsys.readouterr().err
        assert "invalid_arguments:" in err
        assert "limit" in err
        assert env["calls"] == []


class TestStatus:
    def test_authenticated(self, env, capsys):
        env["store"].save("tok")
        env["html"] = "feed"
        assert cli.main(["status"]) == 0
        assert "Authenticated" in capsys.readouterr().out

    def test_not_configured(self, env, capsys):
        assert cli.main(["status"]) == 1
        out = capsys.readouterr().out
        assert "Not authenticated: No cookie configured" in out
        assert "linklion auth" in out


class TestWrites:
    def test_invite(self, env, capsys):
        env["store"].save("tok")
        env["status"] = 201
        assert cli.main(["invite", "urn:li:profile:abc", "-m", "Hello"]) == 0
        assert "Invitation sent (HTTP 201)" in capsys.readouterr().out
        assert json.loads(env["calls"][0].content)["customMessage"] == "Hello"

    def test_invalid_urn(self, env, capsys):
        env["store"].save("tok")
        assert cli.main(["message", "bogus", "Hi"]) == 1
        assert "invalid_urn:" in capsys.readouterr().err
        assert env["calls"] == []
