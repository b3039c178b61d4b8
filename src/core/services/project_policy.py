"""Política de configuración de proyectos por cliente.

Reglas:
- Cada cliente necesita tres grupos: `<code>-developers`, `<code>-business` y
  `<code>-administrators` (en minúsculas).
- Cada grupo debe tener exactamente los roles que le corresponden por sufijo.
- Cada board debe tener filtro y ese filtro debe estar compartido con el
  proyecto.

Todo es puro: sin I/O, sin estado externo.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.domain.models import Board, Filter, Project
from core.domain.validation import Valid, Validated, accumulate, and_then, check, invalid

_GROUP_SUFFIXES = ("developers", "business", "administrators")

_ROLES_BY_SUFFIX: tuple[tuple[str, frozenset[str]], ...] = (
    ("-developers", frozenset({"Team Member"})),
    ("-business", frozenset({"Business Owner"})),
    ("-administrators", frozenset({"Administrators"})),
)


def expected_groups(client_code: str) -> list[str]:
    return [f"{client_code}-{suffix}".lower() for suffix in _GROUP_SUFFIXES]


def expected_roles(group: str) -> frozenset[str]:
    for suffix, roles in _ROLES_BY_SUFFIX:
        if group.endswith(suffix):
            return roles
    return frozenset()


def roles_for_group(project: Project, group: str) -> list[str]:
    """Roles del proyecto a los que está vinculado `group`, en orden de Jira."""

    return [
        group_role.role
        for group_role in project.group_roles
        if any(g.display_name == group for g in group_role.groups)
    ]


def _role_difference(actual: list[str], expected: frozenset[str]) -> tuple[list[str], list[str]]:
    extra = sorted(set(actual) - expected)
    missing = sorted(expected - set(actual))
    return extra, missing


def validated_group(project: Project, group: str) -> Validated[str]:
    """Valida un grupo esperado contra las asignaciones del proyecto.

    Si el grupo no aparece, ese es el único motivo. Si aparece, roles que
    faltan y roles que sobran se reportan a la vez.
    """

    actual = roles_for_group(project, group)
    has_group = check(
        bool(actual),
        group,
        f"Project does not have required group [{group}].",
    )

    def has_expected_roles(present: str) -> Validated[str]:
        extra, missing = _role_difference(actual, expected_roles(present))
        return accumulate(
            present,
            check(not missing, present, f"Missing roles [{', '.join(missing)}]"),
            check(not extra, present, f"Extra roles [{', '.join(extra)}]"),
        )

    return and_then(has_group, has_expected_roles)


def validated_filter(project: Project, board: Board) -> Validated[Filter]:
    """Valida el filtro de un board; las comprobaciones son dependientes."""

    has_filter: Validated[Filter] = (
        Valid(board.filter)
        if board.filter is not None
        else invalid("Project board does not have a filter.")
    )

    def shared_with_project(board_filter: Filter) -> Validated[Filter]:
        return check(
            board_filter.is_shared_with(project.id),
            board_filter,
            "Filter is not shared with project.",
        )

    return and_then(has_filter, shared_with_project)


@dataclass(frozen=True)
class GroupCheck:
    group: str
    roles: list[str]
    outcome: Validated[str]


@dataclass(frozen=True)
class BoardCheck:
    board: Board
    outcome: Validated[Filter]


@dataclass(frozen=True)
class ProjectReport:
    """Resultado completo de la auditoría de un proyecto."""

    project: Project
    client_code: str
    groups: list[GroupCheck] = field(default_factory=list)
    boards: list[BoardCheck] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(c.outcome.ok for c in self.groups) and all(c.outcome.ok for c in self.boards)


def build_report(project: Project, boards: list[Board], client_code: str) -> ProjectReport:
    """Evalúa todas las reglas; nunca lanza, aunque todo falle."""

    groups = [
        GroupCheck(
            group=group,
            roles=roles_for_group(project, group),
            outcome=validated_group(project, group),
        )
        for group in expected_groups(client_code)
    ]
    board_checks = [BoardCheck(board=board, outcome=validated_filter(project, board)) for board in boards]
    return ProjectReport(project=project, client_code=client_code, groups=groups, boards=board_checks)
