"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.jira_client import JiraClient
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import RemoteError, describe_error_chain

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_credentials(settings: AppSettings) -> tuple[bool, str]:
    async with build_async_client(settings) as http:
        client = JiraClient(http, settings)
        try:
            me = await client.get_myself()
        except RemoteError as exc:
            return False, " <- ".join(describe_error_chain(exc))
    if isinstance(me, dict) and me.get("displayName"):
        return True, f"Authenticated as {me['displayName']}"
    return True, "Authenticated"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="jira-audit Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Jira host", "OK", settings.base_url)
    table.add_row("API version", "OK", settings.jira_api_version)
    has_credentials = bool(settings.username and settings.password)
    if has_credentials:
        table.add_row("Credentials", "OK", settings.username or "")
    else:
        table.add_row("Credentials", "MISSING", "Run `doctor setup` or set JIRA_AUDIT_USERNAME/PASSWORD")

    ok_auth = False
    if has_credentials:
        ok_auth, detail = asyncio.run(_check_credentials(settings))
        table.add_row("Jira API", "OK" if ok_auth else "FAIL", detail)

    _console.print(table)

    if not ok_auth:
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive credential setup (stores config in the user config .env)."""

    settings = AppSettings()

    host = typer.prompt("Jira host", default=settings.jira_host, show_default=True).strip()
    username = typer.prompt("Jira user (email)", default=settings.username or "", show_default=True).strip()
    password = typer.prompt("Jira API token", hide_input=True, confirmation_prompt=False).strip()

    if not host or not username or not password:
        raise typer.BadParameter("host, user and token are required")

    env_path = write_user_env_vars(
        {
            "JIRA_AUDIT_JIRA_HOST": host,
            "JIRA_AUDIT_USERNAME": username,
            "JIRA_AUDIT_PASSWORD": password,
        }
    )

    _console.print(f"[green]Saved Jira config to:[/green] {env_path}")
