"""memoctl — command-line client for the memoapp API.

Usage:
    memoctl signup -e me@example.com -p hunter2pass   # Create an account
    memoctl login -e me@example.com -p hunter2pass    # Get and save a token
    memoctl whoami                                    # Show the token's identity
    memoctl note list                                 # Your notes
    memoctl note create -t "groceries" "eggs, milk"   # New note
    memoctl note update -i 3 -t "shopping"            # Change a note
    memoctl note delete -i 3                          # Remove a note
    memoctl logout                                    # Forget the saved token
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from pathlib import Path
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"
API_PREFIX = "/api/v1"


def _config_path() -> Path:
    """~/.config/memoctl/config.json (or the platform equivalent)."""
    return Path(click.get_app_dir("memoctl")) / "config.json"


def load_config() -> dict:
    path = _config_path()
    if not path.exists():
        return {}
    try:
        return json.loads(path.read_text())
    except (OSError, ValueError):
        click.secho(f"Warning: ignoring unreadable config {path}", fg="yellow", err=True)
        return {}


def save_config(cfg: dict) -> None:
    path = _config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg, indent=2))
    # The file holds a bearer token.
    path.chmod(0o600)


def _api_url(cfg: dict) -> str:
    url = os.environ.get("MEMO_API_URL") or cfg.get("api_url") or DEFAULT_API_URL
    return url.rstrip("/")


def _client(cfg: dict) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the memoapp backend."""
    headers = {}
    if cfg.get("token"):
        headers["Authorization"] = f"Bearer {cfg['token']}"
    return httpx.AsyncClient(
        base_url=_api_url(cfg) + API_PREFIX, headers=headers, timeout=30.0
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _fail(r: httpx.Response) -> None:
    """Print an API error and exit non-zero."""
    try:
        detail = r.json().get("detail", r.text)
    except ValueError:
        detail = r.text
    click.secho(f"Error {r.status_code}: {detail}", fg="red", err=True)
    sys.exit(1)


async def _request(method: str, path: str, **kwargs) -> httpx.Response:
    cfg = load_config()
    try:
        async with _client(cfg) as c:
            return await c.request(method, path, **kwargs)
    except httpx.HTTPError as e:
        click.secho(f"Request failed: {e}", fg="red", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="memoctl")
@click.option("--api-url", envvar="MEMO_API_URL", help="API base URL (saved for later runs)")
def main(api_url: Optional[str]):
    """memoctl — manage your memoapp notes from the terminal."""
    if api_url:
        cfg = load_config()
        if cfg.get("api_url") != api_url.rstrip("/"):
            cfg["api_url"] = api_url.rstrip("/")
            save_config(cfg)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@main.command()
@click.option("--email", "-e", required=True)
@click.option("--password", "-p", required=True, prompt=True, hide_input=True)
def signup(email: str, password: str):
    """Create an account."""
    r = _run(_request("POST", "/auth/signup", json={"email": email, "password": password}))
    if r.status_code == 409:
        click.secho("That email is already registered.", fg="yellow")
        sys.exit(1)
    if r.status_code != 201:
        _fail(r)
    click.secho(f"Account #{r.json()['id']} created for {email}", fg="green")


@main.command()
@click.option("--email", "-e", required=True)
@click.option("--password", "-p", required=True, prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and save the token for later commands."""
    r = _run(_request("POST", "/auth/login", json={"email": email, "password": password}))
    if r.status_code != 200:
        _fail(r)
    cfg = load_config()
    cfg["token"] = r.json()["token"]
    save_config(cfg)
    click.secho("Logged in. Token saved.", fg="green")


@main.command()
def logout():
    """Forget the saved token."""
    cfg = load_config()
    cfg.pop("token", None)
    save_config(cfg)
    click.echo("Logged out.")


@main.command()
def whoami():
    """Show the identity behind the saved token."""
    r = _run(_request("GET", "/auth/me"))
    if r.status_code != 200:
        _fail(r)
    me = r.json()
    click.echo(f"user #{me['user_id']} (token expires at {me['expires_at']})")


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


@main.group()
def note():
    """Create, list, update and delete notes."""


@note.command("list")
def note_list():
    r = _run(_request("GET", "/notes"))
    if r.status_code != 200:
        _fail(r)
    click.echo(_pretty_json(r.json()))


@note.command("create")
@click.option("--title", "-t", required=True)
@click.argument("content")
def note_create(title: str, content: str):
    r = _run(_request("POST", "/notes", json={"title": title, "content": content}))
    if r.status_code != 201:
        _fail(r)
    click.echo(_pretty_json(r.json()))


@note.command("update")
@click.option("--id", "-i", "note_id", type=int, required=True)
@click.option("--title", "-t")
@click.argument("content", required=False)
def note_update(note_id: int, title: Optional[str], content: Optional[str]):
    """Change a note's title and/or content."""
    if title is None and content is None:
        raise click.UsageError("Nothing to update: pass --title and/or CONTENT")
    body = {}
    if title is not None:
        body["title"] = title
    if content is not None:
        body["content"] = content
    r = _run(_request("PUT", f"/notes/{note_id}", json=body))
    if r.status_code != 200:
        _fail(r)
    click.echo(_pretty_json(r.json()))


@note.command("delete")
@click.option("--id", "-i", "note_id", type=int, required=True)
def note_delete(note_id: int):
    r = _run(_request("DELETE", f"/notes/{note_id}"))
    if r.status_code != 200:
        _fail(r)
    click.echo(f"Note #{note_id} deleted.")


if __name__ == "__main__":
    main()
