"""Exportación JSON del reporte de auditoría.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines (CI, dashboards).
- Los nombres de campo siguen la API de Jira (camelCase).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.domain.models import Board
from core.domain.validation import Validated
from core.services.project_policy import ProjectReport


def _outcome(outcome: Validated[Any]) -> dict[str, Any]:
    return {"ok": outcome.ok, "reasons": list(outcome.reasons)}


def boards_payload(boards: list[Board]) -> list[dict[str, Any]]:
    return [board.model_dump(mode="json", by_alias=True) for board in boards]


def report_payload(report: ProjectReport) -> dict[str, Any]:
    project = report.project
    return {
        "project": {
            "id": project.id,
            "key": project.key,
            "name": project.name,
            "lead": project.lead.display_name,
        },
        "clientCode": report.client_code,
        "ok": report.ok,
        "groups": [
            {"group": c.group, "roles": c.roles, **_outcome(c.outcome)}
            for c in report.groups
        ],
        "boards": [
            {
                "id": c.board.id,
                "name": c.board.name,
                "type": c.board.type,
                "jql": c.board.filter.jql if c.board.filter else None,
                **_outcome(c.outcome),
            }
            for c in report.boards
        ],
    }


def export_report_json(*, report: ProjectReport, output_path: Path) -> Path:
    """Exporta `ProjectReport` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = report_payload(report)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
