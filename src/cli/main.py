"""CLI principal (Typer).

Por qué Typer:
- Opciones tipadas y ayuda autogenerada sin boilerplate.
- La CLI solo traduce argumentos a llamadas del Core y pinta resultados;
  la orquestación vive en `core.services.project_pipeline`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console

from adapters.http_client import build_async_client
from adapters.jira_client import JiraClient
from adapters.json_exporter import boards_payload, export_report_json
from adapters.progress import RichProgressReporter, build_progress
from cli import doctor
from cli.logging_setup import configure_logging
from cli.ui_components import print_report
from core.config import AppSettings
from core.domain.errors import ProjectAuditError, describe_error_chain
from core.services.project_pipeline import AuditContext, AuditResult, audit_project

logger = logging.getLogger(__name__)

app = typer.Typer(
    no_args_is_help=True,
    help="Audits Jira project configuration (groups, roles, boards, filters).",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


@dataclass
class GlobalOptions:
    settings: AppSettings
    username: str | None
    password: str | None


@app.callback()
def main(
    ctx: typer.Context,
    username: str | None = typer.Option(
        None,
        "--username",
        "-u",
        help="Jira user (email). Defaults to JIRA_AUDIT_USERNAME.",
    ),
    password: str | None = typer.Option(
        None,
        "--password",
        "-p",
        help="Jira API token. Defaults to JIRA_AUDIT_PASSWORD.",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    settings = AppSettings()
    try:
        configure_logging(log_level or settings.log_level, console=_err_console)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    ctx.obj = GlobalOptions(
        settings=settings,
        username=username or settings.username,
        password=password or settings.password,
    )


async def _run_audit(options: GlobalOptions, *, project_key: str, client_code: str) -> AuditResult:
    async with build_async_client(
        options.settings,
        username=options.username,
        password=options.password,
    ) as http:
        with build_progress(_err_console) as progress:
            audit_ctx = AuditContext(
                client=JiraClient(http, options.settings),
                progress=RichProgressReporter(progress),
            )
            return await audit_project(audit_ctx, project_key=project_key, client_code=client_code)


def _print_failure(error: BaseException) -> None:
    lines = describe_error_chain(error)
    _err_console.print(lines[0], style="red", markup=False, highlight=False)
    for line in lines[1:]:
        _err_console.print(f"  caused by: {line}", markup=False, highlight=False)


@app.command("get-project")
def get_project(
    ctx: typer.Context,
    project_key: str = typer.Option(..., "--project-key", "--key", help="The key of the project."),
    client_code: str = typer.Option(..., "--client-code", "--client", help="The code of the client."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print the fetched boards as JSON."),
    export_json: Path | None = typer.Option(
        None,
        "--export-json",
        help="Write the validation report as JSON to this path.",
    ),
) -> None:
    """Fetches details of a Jira project and checks whether it is configured correctly."""

    options: GlobalOptions = ctx.obj
    if not options.username or not options.password:
        _err_console.print(
            "[red]Missing Jira credentials.[/red] Use --username/--password, "
            "JIRA_AUDIT_USERNAME/JIRA_AUDIT_PASSWORD or `doctor setup`."
        )
        raise typer.Exit(code=2)

    try:
        result = asyncio.run(_run_audit(options, project_key=project_key, client_code=client_code))
    except ProjectAuditError as exc:
        logger.debug("Audit of [%s] failed", project_key, exc_info=exc)
        _print_failure(exc)
        raise typer.Exit(code=1) from exc

    if result.report is None:
        _err_console.print(
            f"Project [{project_key}] does not exist or is not visible.",
            style="yellow",
            markup=False,
        )
        return

    if verbose:
        _console.print_json(json.dumps(boards_payload(result.snapshot.boards)))
    else:
        print_report(_console, result.report)

    if export_json is not None:
        path = export_report_json(report=result.report, output_path=export_json)
        _err_console.print(f"Report written to {path}", markup=False)


def run() -> None:
    app()
