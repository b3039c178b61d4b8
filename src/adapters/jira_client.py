"""Cliente Jira (REST v3 + Agile v1), solo lectura.

Responsabilidad:
- Una función por operación remota; cada una devuelve el JSON crudo.
- Política de reintentos acotada para fallos transitorios (red, 429, 5xx).
- Traducir "No project could be found with ..." a `ProjectNotFoundError`.

La decodificación a modelos vive en el Core (`core.services.decoder`).
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable

import httpx

from adapters.http_client import make_request
from core.config import AppSettings
from core.domain.errors import ProjectNotFoundError, RemoteError, ServiceError

logger = logging.getLogger(__name__)

PROJECT_NOT_FOUND_PREFIX = "No project could be found with"

_AGILE_API = "/rest/agile/1.0"


def _retry_after_seconds(error: RemoteError) -> float | None:
    response = getattr(error.__cause__, "response", None)
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    value = headers.get("retry-after")
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


class JiraClient:
    """Implementación HTTP de `core.interfaces.jira.JiraSource`."""

    def __init__(self, http: httpx.AsyncClient, settings: AppSettings | None = None) -> None:
        self._http = http
        self._settings = settings or AppSettings()
        self._api = f"/rest/api/{self._settings.jira_api_version}"

    async def _get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        return await self._with_retries(
            lambda: make_request(lambda: self._http.get(path, params=params), context=path),
            context=path,
        )

    async def _with_retries(self, call: Callable[[], Awaitable[Any]], *, context: str) -> Any:
        max_retries = self._settings.max_retries
        for attempt in range(max_retries + 1):
            try:
                return await call()
            except RemoteError as exc:
                if not exc.retryable or attempt >= max_retries:
                    raise
                retry_after = _retry_after_seconds(exc)
                base = (
                    min(retry_after, self._settings.retry_after_max_seconds)
                    if retry_after is not None
                    else self._settings.retry_backoff_seconds * (2**attempt)
                )
                delay = base + random.uniform(0.0, 0.25 * self._settings.retry_backoff_seconds)
                logger.warning(
                    "Transient Jira failure on [%s] (%s); retry %d/%d in %.2fs",
                    context,
                    exc.kind.value,
                    attempt + 1,
                    max_retries,
                    delay,
                )
                await asyncio.sleep(delay)
        raise AssertionError("unreachable")  # pragma: no cover

    async def get_project(self, project_key: str) -> Any:
        try:
            return await self._get(f"{self._api}/project/{project_key}")
        except ServiceError as exc:
            if exc.has_message_prefix(PROJECT_NOT_FOUND_PREFIX):
                raise ProjectNotFoundError(
                    f"Project [{project_key}] does not exist.",
                    project_key,
                    exc.error_messages,
                    status_code=exc.status_code,
                ) from exc
            raise

    async def get_project_roles(self, project_key: str) -> Any:
        return await self._get(f"{self._api}/project/{project_key}/roledetails")

    async def get_project_role(self, project_key: str, role_id: int) -> Any:
        return await self._get(f"{self._api}/project/{project_key}/role/{role_id}")

    async def get_project_boards(self, project_key: str, *, start_at: int = 0) -> Any:
        return await self._get(
            f"{_AGILE_API}/board",
            params={"projectKeyOrId": project_key, "type": "kanban", "startAt": start_at},
        )

    async def get_board_configuration(self, board_id: int) -> Any:
        return await self._get(f"{_AGILE_API}/board/{board_id}/configuration")

    async def get_filter(self, filter_id: str) -> Any:
        return await self._get(f"{self._api}/filter/{filter_id}")

    async def get_myself(self) -> Any:
        return await self._get(f"{self._api}/myself")
