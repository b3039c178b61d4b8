"""Project audit orchestration.

The fetch graph has two independent roots that run concurrently:

    project ──> role summaries ──> role detail (one at a time)
    boards  ──> per board: configuration ──> filter (if referenced)

Everything below a root is strictly sequential to stay inside Jira's
per-user rate limits; the whole graph lives in `fetch_project_snapshot`.
Collaborators (Jira source, progress sink) come in through `AuditContext`
so tests can swap them for fakes.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Coroutine, TypeVar

from pydantic import TypeAdapter

from core.domain.errors import ProjectAuditError, ProjectNotFoundError, RemoteError
from core.domain.models import (
    Board,
    BoardConfiguration,
    BoardPage,
    BoardSummary,
    Filter,
    JiraProject,
    Project,
    ProjectGroupRole,
    ProjectRoleDetails,
    ProjectRoleSummary,
)
from core.interfaces.jira import JiraSource
from core.interfaces.progress import ProgressHandle, ProgressReporter
from core.services.decoder import decode
from core.services.project_policy import ProjectReport, build_report

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ROLE_SUMMARIES = TypeAdapter(list[ProjectRoleSummary])


class _NullHandle:
    def success(self) -> None:
        return None

    def fail(self) -> None:
        return None


class SilentProgressReporter:
    """Progress sink that reports nothing (tests, library callers)."""

    def start(self, message: str) -> ProgressHandle:
        return _NullHandle()


@dataclass
class AuditContext:
    """Capabilities passed explicitly into every fetch."""

    client: JiraSource
    progress: ProgressReporter = field(default_factory=SilentProgressReporter)


@dataclass
class ProjectSnapshot:
    """Output of the fetch graph: the project (if visible) and its boards."""

    project: Project | None
    boards: list[Board] = field(default_factory=list)


@dataclass
class AuditResult:
    snapshot: ProjectSnapshot
    report: ProjectReport | None = None


async def with_progress(ctx: AuditContext, message: str, operation: Awaitable[T]) -> T:
    """Wraps one remote call with start/success/fail notifications."""

    handle = ctx.progress.start(message)
    try:
        result = await operation
    except BaseException:
        handle.fail()
        raise
    handle.success()
    return result


async def fetch_project(ctx: AuditContext, project_key: str) -> Project | None:
    """Project with its group/role bindings, or `None` when Jira says it does not exist."""

    try:
        payload = await with_progress(
            ctx,
            f"Fetching project [{project_key}]",
            ctx.client.get_project(project_key),
        )
    except ProjectNotFoundError:
        logger.info("Project [%s] not found or not visible", project_key)
        return None

    jira_project = decode(
        JiraProject,
        payload,
        message=f"Failed to decode project response for [{project_key}].",
    )
    group_roles = await fetch_project_roles(ctx, jira_project.key)
    return Project.from_jira(jira_project, group_roles)


async def fetch_project_roles(ctx: AuditContext, project_key: str) -> list[ProjectGroupRole]:
    payload = await with_progress(
        ctx,
        f"Fetching roles for project [{project_key}]",
        ctx.client.get_project_roles(project_key),
    )
    summaries = decode(
        _ROLE_SUMMARIES,
        payload,
        message=f"Failed to decode project roles response for [{project_key}].",
    )

    group_roles: list[ProjectGroupRole] = []
    for summary in summaries:
        details = await fetch_project_role(ctx, project_key, summary.id)
        group_roles.append(
            ProjectGroupRole(
                role=details.name,
                groups=[actor.actor_group for actor in details.group_actors()],
            )
        )
    return group_roles


async def fetch_project_role(ctx: AuditContext, project_key: str, role_id: int) -> ProjectRoleDetails:
    payload = await with_progress(
        ctx,
        f"Fetching role [{role_id}] for project [{project_key}]",
        ctx.client.get_project_role(project_key, role_id),
    )
    return decode(
        ProjectRoleDetails,
        payload,
        message=(
            f"Failed to decode project role response for project [{project_key}] "
            f"and role [{role_id}]."
        ),
    )


async def list_project_boards(ctx: AuditContext, project_key: str) -> list[BoardSummary]:
    """All kanban boards of the project, following `isLast` pagination."""

    boards: list[BoardSummary] = []
    start_at = 0
    while True:
        payload = await with_progress(
            ctx,
            f"Fetching boards for project [{project_key}]",
            ctx.client.get_project_boards(project_key, start_at=start_at),
        )
        page = decode(
            BoardPage,
            payload,
            message=f"Failed to decode boards response for project [{project_key}] at [{start_at}].",
        )
        boards.extend(page.values)
        if page.is_last or not page.values:
            return boards
        start_at = page.start_at + len(page.values)


async def fetch_board(ctx: AuditContext, summary: BoardSummary) -> Board:
    payload = await with_progress(
        ctx,
        f"Fetching configuration for board [{summary.name}]",
        ctx.client.get_board_configuration(summary.id),
    )
    configuration = decode(
        BoardConfiguration,
        payload,
        message=f"Failed to decode board configuration response for board [{summary.id}].",
    )

    board_filter: Filter | None = None
    if configuration.filter is not None:
        filter_id = configuration.filter.id
        filter_payload = await with_progress(
            ctx,
            f"Fetching filter [{filter_id}] for board [{summary.name}]",
            ctx.client.get_filter(filter_id),
        )
        board_filter = decode(
            Filter,
            filter_payload,
            message=f"Failed to decode filter [{filter_id}] for board [{summary.id}].",
        )

    return Board(
        id=configuration.id,
        name=configuration.name,
        type=configuration.type,
        filter=board_filter,
    )


async def fetch_project_boards(ctx: AuditContext, project_key: str) -> list[Board]:
    summaries = await list_project_boards(ctx, project_key)
    boards: list[Board] = []
    for summary in summaries:
        boards.append(await fetch_board(ctx, summary))
    return boards


async def _run_roots(*roots: Coroutine[Any, Any, Any]) -> list[Any]:
    """Runs independent roots concurrently; the first failure cancels the rest."""

    tasks = [asyncio.ensure_future(root) for root in roots]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def fetch_project_snapshot(ctx: AuditContext, project_key: str) -> ProjectSnapshot:
    project, boards = await _run_roots(
        fetch_project(ctx, project_key),
        fetch_project_boards(ctx, project_key),
    )
    return ProjectSnapshot(project=project, boards=boards)


async def audit_project(
    ctx: AuditContext,
    *,
    project_key: str,
    client_code: str,
) -> AuditResult:
    """Fetches the project graph and validates it against the client policy.

    Unrecovered remote failures surface as `ProjectAuditError` with the
    original error as `__cause__`.
    """

    try:
        snapshot = await fetch_project_snapshot(ctx, project_key)
    except RemoteError as exc:
        raise ProjectAuditError(f"Failed to get project [{project_key}].", project_key) from exc

    if snapshot.project is None:
        return AuditResult(snapshot=snapshot)
    report = build_report(snapshot.project, snapshot.boards, client_code)
    return AuditResult(snapshot=snapshot, report=report)
