"""filekeep CLI — sign in and manage your files from a terminal.

Usage:
    filekeep signup me@example.com              # Create an account (prompts for password)
    filekeep signin me@example.com              # Sign in, remember the session locally
    filekeep whoami                             # Show the signed-in account
    filekeep files list                         # List your files
    filekeep files new                          # Create an empty file
    filekeep files rename <id> "Groceries"      # Rename a file
    filekeep files write <id> notes.txt         # Upload content from a local file
    filekeep files show <id>                    # Print a file's content
    filekeep files rm <id>                      # Delete a file
    filekeep signout                            # Forget the session
    filekeep serve                              # Run the API server
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import sys
from pathlib import Path
from typing import Optional

import click
import httpx

from filekeep import __version__
from filekeep.config import settings

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("FILEKEEP_API_URL", DEFAULT_API_URL).rstrip("/")


def _session_file() -> Path:
    default = Path.home() / ".filekeep" / "session"
    return Path(os.environ.get("FILEKEEP_SESSION_FILE", default))


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


def _load_session() -> Optional[str]:
    path = _session_file()
    if not path.exists():
        return None
    return path.read_text().strip() or None


def _save_session(token: str) -> None:
    path = _session_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(token)
    path.chmod(0o600)


def _forget_session() -> None:
    _session_file().unlink(missing_ok=True)


def _client(obj: dict, authenticated: bool = True) -> httpx.AsyncClient:
    """Build an async HTTP client, carrying the saved session cookie."""
    cookies = {}
    if authenticated:
        token = _load_session()
        if not token:
            click.secho("Not signed in. Run: filekeep signin <email>", fg="red", err=True)
            sys.exit(1)
        cookies[settings.cookie_name] = token
    return httpx.AsyncClient(
        base_url=obj["api_url"],
        cookies=cookies,
        transport=obj.get("transport"),
        timeout=30.0,
    )


def _check(r: httpx.Response) -> httpx.Response:
    """Exit with the server's error detail on a non-2xx response."""
    if r.is_success:
        return r
    try:
        detail = r.json().get("detail", r.text)
    except ValueError:
        detail = r.text
    click.secho(f"Error {r.status_code}: {detail}", fg="red", err=True)
    if r.status_code == 401:
        click.echo("Your session may have expired. Run: filekeep signin <email>", err=True)
    sys.exit(1)


def _print_file_row(f: dict) -> None:
    click.echo(f"{f['id']}  {f['title'][:40].ljust(40)}  {f['updated_at']}")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="filekeep")
@click.option("--api-url", default=None, help="API base URL (or set FILEKEEP_API_URL)")
@click.pass_context
def main(ctx: click.Context, api_url: Optional[str]):
    """filekeep — personal file storage from the command line."""
    ctx.ensure_object(dict)
    ctx.obj["api_url"] = (api_url or _api_url()).rstrip("/")


@main.command()
@click.pass_obj
def ping(obj: dict):
    """Check that the API is reachable."""
    async def _impl():
        async with _client(obj, authenticated=False) as c:
            _check(await c.get("/api/v1/users/ping"))
            click.secho("pong", fg="green")

    _run(_impl())


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.option("--name", "-n", help="Display name")
@click.password_option()
@click.pass_obj
def signup(obj: dict, email: str, name: Optional[str], password: str):
    """Create an account."""
    async def _impl():
        async with _client(obj, authenticated=False) as c:
            r = _check(await c.post(
                "/api/v1/users/signup",
                json={"email": email, "password": password, "name": name},
            ))
            click.secho(f"Account created for {r.json()['email']}", fg="green")
            click.echo("Now run: filekeep signin " + email)

    _run(_impl())


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
@click.pass_obj
def signin(obj: dict, email: str, password: str):
    """Sign in and remember the session cookie."""
    async def _impl():
        async with _client(obj, authenticated=False) as c:
            r = _check(await c.post(
                "/api/v1/users/signin",
                json={"email": email, "password": password},
            ))
            token = r.cookies.get(settings.cookie_name)
            if not token:
                click.secho("Server did not return a session cookie", fg="red", err=True)
                sys.exit(1)
            _save_session(token)
            click.secho(f"Signed in as {r.json()['email']}", fg="green")

    _run(_impl())


@main.command()
@click.pass_obj
def signout(obj: dict):
    """Sign out and forget the local session."""
    async def _impl():
        async with _client(obj, authenticated=False) as c:
            _check(await c.post("/api/v1/users/signout"))

    _run(_impl())
    _forget_session()
    click.echo("Signed out.")


@main.command()
@click.pass_obj
def whoami(obj: dict):
    """Show the signed-in account."""
    async def _impl():
        async with _client(obj) as c:
            user = _check(await c.get("/api/v1/users/me")).json()
            click.echo(f"{user['email']}  ({user['id']})")

    _run(_impl())


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


@main.group()
def files():
    """Manage your files."""


@files.command("list")
@click.pass_obj
def files_list(obj: dict):
    """List your files."""
    async def _impl():
        async with _client(obj) as c:
            rows = _check(await c.get("/api/v1/files")).json()
            if not rows:
                click.echo("No files yet. Create one with: filekeep files new")
                return
            for f in rows:
                _print_file_row(f)

    _run(_impl())


@files.command("new")
@click.option("--title", "-t", help="Title for the new file")
@click.pass_obj
def files_new(obj: dict, title: Optional[str]):
    """Create an empty file."""
    async def _impl():
        async with _client(obj) as c:
            f = _check(await c.post("/api/v1/files")).json()
            if title:
                f = _check(await c.patch(f"/api/v1/files/{f['id']}", json={"title": title})).json()
            click.secho(f"Created {f['id']}  {f['title']}", fg="green")

    _run(_impl())


@files.command("show")
@click.argument("file_id")
@click.pass_obj
def files_show(obj: dict, file_id: str):
    """Print a file's content."""
    async def _impl():
        async with _client(obj) as c:
            f = _check(await c.get(f"/api/v1/files/{file_id}")).json()
            click.secho(f["title"], bold=True)
            click.echo(f["content"])

    _run(_impl())


@files.command("rename")
@click.argument("file_id")
@click.argument("title")
@click.pass_obj
def files_rename(obj: dict, file_id: str, title: str):
    """Rename a file."""
    async def _impl():
        async with _client(obj) as c:
            f = _check(await c.patch(f"/api/v1/files/{file_id}", json={"title": title})).json()
            click.echo(f"Renamed to {f['title']}")

    _run(_impl())


@files.command("write")
@click.argument("file_id")
@click.argument("source", type=click.File("r"))
@click.pass_obj
def files_write(obj: dict, file_id: str, source):
    """Replace a file's content with SOURCE ('-' for stdin)."""
    content = source.read()

    async def _impl():
        async with _client(obj) as c:
            _check(await c.put(f"/api/v1/files/{file_id}/content", json={"content": content}))
            click.echo(f"Wrote {len(content)} characters")

    _run(_impl())


@files.command("rm")
@click.argument("file_id")
@click.pass_obj
def files_rm(obj: dict, file_id: str):
    """Delete a file."""
    async def _impl():
        async with _client(obj) as c:
            _check(await c.delete(f"/api/v1/files/{file_id}"))
            click.echo("Deleted.")

    _run(_impl())


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=settings.host, show_default=True)
@click.option("--port", default=settings.port, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str, port: int, reload: bool):
    """Run the API server with uvicorn."""
    import uvicorn

    uvicorn.run("filekeep.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
