"""Contrato de la fuente de datos Jira.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El orquestador depende de esta abstracción; los tests la sustituyen por un
  fake en memoria sin tocar HTTP.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class JiraSource(Protocol):
    """Operaciones remotas de solo lectura usadas por la auditoría.

    Reglas de diseño:
    - Cada método hace exactamente una petición y devuelve el JSON crudo.
    - Los fallos llegan ya clasificados como `RemoteError`; `get_project`
      lanza `ProjectNotFoundError` cuando Jira dice que no existe.
    """

    async def get_project(self, project_key: str) -> Any: ...

    async def get_project_roles(self, project_key: str) -> Any: ...

    async def get_project_role(self, project_key: str, role_id: int) -> Any: ...

    async def get_project_boards(self, project_key: str, *, start_at: int = 0) -> Any: ...

    async def get_board_configuration(self, board_id: int) -> Any: ...

    async def get_filter(self, filter_id: str) -> Any: ...
