"""Shared fixtures: Jira payload builders and an in-memory `JiraSource`."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from core.domain.errors import ProjectNotFoundError
from core.domain.models import Group, JiraUser, Project, ProjectGroupRole


def project_payload(*, id: str = "10000", key: str = "ACME") -> dict[str, Any]:
    return {
        "self": f"https://example.atlassian.net/rest/api/3/project/{id}",
        "id": id,
        "key": key,
        "name": "Acme Platform",
        "projectTypeKey": "software",
        "lead": {
            "displayName": "Lead Person",
            "accountId": "lead-account",
            "self": "https://example.atlassian.net/rest/api/3/user?accountId=lead-account",
        },
    }


def role_summary(role_id: int, name: str) -> dict[str, Any]:
    return {"id": role_id, "name": name, "self": f"https://example.atlassian.net/role/{role_id}"}


def group_actor(actor_id: int, group: str) -> dict[str, Any]:
    return {
        "id": actor_id,
        "displayName": group,
        "type": "atlassian-group-role-actor",
        "actorGroup": {"groupId": f"gid-{group}", "displayName": group, "name": group},
    }


def user_actor(actor_id: int, name: str) -> dict[str, Any]:
    return {
        "id": actor_id,
        "displayName": name,
        "type": "atlassian-user-role-actor",
        "actorUser": {"accountId": f"acc-{name}"},
    }


def role_details(role_id: int, name: str, actors: list[dict[str, Any]]) -> dict[str, Any]:
    return {**role_summary(role_id, name), "actors": actors}


def board_page(boards: list[dict[str, Any]], *, start_at: int = 0, is_last: bool = True) -> dict[str, Any]:
    return {"startAt": start_at, "maxResults": 50, "isLast": is_last, "values": boards}


def board_summary(board_id: int, name: str) -> dict[str, Any]:
    return {"id": board_id, "name": name, "type": "kanban"}


def board_configuration(board_id: int, name: str, filter_id: str | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"id": board_id, "name": name, "type": "kanban"}
    if filter_id is not None:
        payload["filter"] = {"id": filter_id, "self": f"https://example.atlassian.net/filter/{filter_id}"}
    return payload


def filter_payload(filter_id: str, *, shared_with: list[str], jql: str = "project = ACME") -> dict[str, Any]:
    return {
        "id": filter_id,
        "name": f"Filter for {filter_id}",
        "jql": jql,
        "sharePermissions": [
            {"id": index, "type": "project", "project": {"id": project_id, "key": "X"}}
            for index, project_id in enumerate(shared_with)
        ],
    }


def make_project(group_roles: dict[str, list[str]] | None = None, *, id: str = "10000") -> Project:
    """Domain project from a `{role: [group, ...]}` mapping."""

    return Project(
        id=id,
        key="ACME",
        name="Acme Platform",
        lead=JiraUser(display_name="Lead Person", account_id="lead-account"),
        group_roles=[
            ProjectGroupRole(
                role=role,
                groups=[Group(group_id=f"gid-{g}", display_name=g) for g in groups],
            )
            for role, groups in (group_roles or {}).items()
        ],
    )


class FakeJiraSource:
    """In-memory Jira that records calls and tracks how many are in flight."""

    def __init__(self) -> None:
        self.project: Any = project_payload()
        self.roles: Any = []
        self.role_details: dict[int, Any] = {}
        self.board_pages: dict[int, Any] = {0: board_page([])}
        self.configurations: dict[int, Any] = {}
        self.filters: dict[str, Any] = {}
        self.errors: dict[str, BaseException] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.in_flight: dict[str, int] = {"project": 0, "boards": 0}
        self.max_in_flight: dict[str, int] = {"project": 0, "boards": 0}
        self.delay = 0.0

    async def _call(self, branch: str, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        self.in_flight[branch] += 1
        self.max_in_flight[branch] = max(self.max_in_flight[branch], self.in_flight[branch])
        try:
            await asyncio.sleep(self.delay)
            if name in self.errors:
                raise self.errors[name]
        finally:
            self.in_flight[branch] -= 1

    async def get_project(self, project_key: str) -> Any:
        await self._call("project", "get_project", project_key)
        if self.project is None:
            raise ProjectNotFoundError(
                f"Project [{project_key}] does not exist.",
                project_key,
                [f"No project could be found with key '{project_key}'."],
                status_code=404,
            )
        return self.project

    async def get_project_roles(self, project_key: str) -> Any:
        await self._call("project", "get_project_roles", project_key)
        return self.roles

    async def get_project_role(self, project_key: str, role_id: int) -> Any:
        await self._call("project", "get_project_role", project_key, role_id)
        return self.role_details[role_id]

    async def get_project_boards(self, project_key: str, *, start_at: int = 0) -> Any:
        await self._call("boards", "get_project_boards", project_key, start_at)
        return self.board_pages[start_at]

    async def get_board_configuration(self, board_id: int) -> Any:
        await self._call("boards", "get_board_configuration", board_id)
        return self.configurations[board_id]

    async def get_filter(self, filter_id: str) -> Any:
        await self._call("boards", "get_filter", filter_id)
        return self.filters[filter_id]

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


class RecordingProgress:
    """Progress sink that records start/success/fail events."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def start(self, message: str) -> "_RecordingHandle":
        self.events.append(("start", message))
        return _RecordingHandle(self, message)


class _RecordingHandle:
    def __init__(self, owner: RecordingProgress, message: str) -> None:
        self._owner = owner
        self._message = message

    def success(self) -> None:
        self._owner.events.append(("success", self._message))

    def fail(self) -> None:
        self._owner.events.append(("fail", self._message))


@pytest.fixture
def fake_jira() -> FakeJiraSource:
    return FakeJiraSource()


@pytest.fixture
def progress() -> RecordingProgress:
    return RecordingProgress()
