"""memoctl CLI tests.

Learn: The CLI talks HTTP through _client(), so tests swap that for an
httpx client on a MockTransport and record what was sent. The config
file is redirected into tmp_path.
"""

import json
import stat

import httpx
import pytest
from click.testing import CliRunner

from memoapp.cli import main as cli


class FakeApi:
    """Answers a handful of routes the way the real API does."""

    def __init__(self):
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        body = json.loads(request.content) if request.content else {}

        if path == "/api/v1/auth/signup":
            if body["email"] == "taken@example.com":
                return httpx.Response(409, json={"detail": "Email already registered"})
            return httpx.Response(
                201, json={"id": 7, "email": body["email"], "created_at": 0}
            )
        if path == "/api/v1/auth/login":
            if body["password"] != "password123":
                return httpx.Response(401, json={"detail": "Invalid credentials"})
            return httpx.Response(
                200, json={"token": "tok-abc", "token_type": "bearer", "expires_in": 3600}
            )
        if path == "/api/v1/auth/me":
            if request.headers.get("Authorization") != "Bearer tok-abc":
                return httpx.Response(401, json={"detail": "Authentication required"})
            return httpx.Response(
                200, json={"user_id": 7, "issued_at": 100, "expires_at": 3700}
            )
        if path == "/api/v1/notes" and request.method == "GET":
            return httpx.Response(200, json=[])
        if path.startswith("/api/v1/notes/") and request.method == "PUT":
            return httpx.Response(200, json={"id": 3, **body})
        return httpx.Response(404, json={"detail": "Not Found"})


@pytest.fixture()
def api(tmp_path, monkeypatch):
    fake = FakeApi()
    transport = httpx.MockTransport(fake)

    def client(cfg):
        headers = {}
        if cfg.get("token"):
            headers["Authorization"] = f"Bearer {cfg['token']}"
        return httpx.AsyncClient(
            base_url=cli._api_url(cfg) + cli.API_PREFIX,
            headers=headers,
            transport=transport,
        )

    monkeypatch.delenv("MEMO_API_URL", raising=False)
    monkeypatch.setattr(cli, "_config_path", lambda: tmp_path / "config.json")
    monkeypatch.setattr(cli, "_client", client)
    return fake


@pytest.fixture()
def runner():
    return CliRunner()


def test_signup(api, runner):
    result = runner.invoke(cli.main, ["signup", "-e", "me@example.com", "-p", "password123"])
    assert result.exit_code == 0, result.output
    assert "Account #7 created for me@example.com" in result.output


def test_signup_taken(api, runner):
    result = runner.invoke(cli.main, ["signup", "-e", "taken@example.com", "-p", "password123"])
    assert result.exit_code == 1
    assert "already registered" in result.output


def test_login_saves_token(api, runner, tmp_path):
    result = runner.invoke(cli.main, ["login", "-e", "me@example.com", "-p", "password123"])
    assert result.exit_code == 0, result.output

    path = tmp_path / "config.json"
    assert json.loads(path.read_text())["token"] == "tok-abc"
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_login_bad_password(api, runner, tmp_path):
    result = runner.invoke(cli.main, ["login", "-e", "me@example.com", "-p", "nope"])
    assert result.exit_code == 1
    assert "Error 401: Invalid credentials" in result.output
    assert not (tmp_path / "config.json").exists()


def test_whoami_uses_saved_token(api, runner):
    runner.invoke(cli.main, ["login", "-e", "me@example.com", "-p", "password123"])
    result = runner.invoke(cli.main, ["whoami"])

    assert result.exit_code == 0, result.output
    assert "user #7" in result.output
    assert api.requests[-1].headers["Authorization"] == "Bearer tok-abc"


def test_logout_forgets_token(api, runner, tmp_path):
    runner.invoke(cli.main, ["login", "-e", "me@example.com", "-p", "password123"])
    runner.invoke(cli.main, ["logout"])

    assert "token" not in json.loads((tmp_path / "config.json").read_text())
    result = runner.invoke(cli.main, ["whoami"])
    assert result.exit_code == 1
    assert "Error 401" in result.output


def test_note_update_needs_something(api, runner):
    result = runner.invoke(cli.main, ["note", "update", "-i", "3"])
    assert result.exit_code == 2
    assert api.requests == []


def test_note_update_sends_only_given_fields(api, runner):
    result = runner.invoke(cli.main, ["note", "update", "-i", "3", "-t", "Shopping"])
    assert result.exit_code == 0, result.output
    assert json.loads(api.requests[-1].content) == {"title": "Shopping"}


def test_api_url_option_is_saved(api, runner, tmp_path):
    runner.invoke(cli.main, ["--api-url", "http://notes.internal:9000/", "note", "list"])

    assert json.loads((tmp_path / "config.json").read_text())["api_url"] == (
        "http://notes.internal:9000"
    )
    assert str(api.requests[-1].url) == "http://notes.internal:9000/api/v1/notes"
