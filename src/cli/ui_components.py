"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Se construye con `Text` (no markup) porque nombres como `[acme-developers]`
  chocarían con la sintaxis de markup de Rich.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from core.domain.validation import Invalid, Validated
from core.services.project_policy import BoardCheck, GroupCheck, ProjectReport


def _status(outcome: Validated[Any]) -> Text:
    if isinstance(outcome, Invalid):
        return Text.assemble(("❌", "red"), f" ({', '.join(outcome.reasons)})")
    return Text("✅", style="green")


def _group_line(check: GroupCheck) -> Text:
    return Text.assemble(
        (check.group, "bold"),
        f": [{','.join(check.roles)}] ",
        _status(check.outcome),
    )


def _board_node(parent: Tree, check: BoardCheck) -> None:
    node = parent.add(Text(f"{check.board.name}:", style="bold"))
    node.add(Text(f"type: {check.board.type}"))
    filter_node = node.add(Text.assemble("filter: ", _status(check.outcome)))
    if check.outcome.ok and check.board.filter is not None:
        filter_node.add(Text(f"jql: {check.board.filter.jql}", style="dim"))


def build_report_tree(report: ProjectReport) -> Tree:
    """Árbol con los datos del proyecto, grupos y boards validados."""

    project = report.project
    tree = Tree(Text(f"{project.key} ({project.name})", style="bold cyan"))
    tree.add(Text(f"id: {project.id}"))
    tree.add(Text(f"key: {project.key}"))
    tree.add(Text(f"lead: {project.lead.display_name}"))

    groups = tree.add(Text("groups:", style="bold"))
    for check in report.groups:
        groups.add(_group_line(check))

    boards = tree.add(Text("boards:", style="bold"))
    if not report.boards:
        boards.add(Text("(none)", style="dim"))
    for check in report.boards:
        _board_node(boards, check)
    return tree


def print_report(console: Console, report: ProjectReport) -> None:
    console.print(build_report_tree(report))
    if report.ok:
        console.print("[green]All checks passed.[/green]")
    else:
        failed = sum(not c.outcome.ok for c in report.groups) + sum(not c.outcome.ok for c in report.boards)
        console.print(f"[red]{failed} check(s) failed.[/red]")
