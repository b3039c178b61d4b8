"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base URL, auth, timeouts y headers para Jira.
- Clasifica cada fallo en un `RemoteError` tipado en un único punto.
- Facilita testeo: se puede sustituir el transporte por `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.config import AppSettings
from core.domain.errors import (
    DecodeError,
    ServiceError,
    TransportError,
    UnknownRemoteError,
)

logger = logging.getLogger(__name__)


class JiraErrorResponse(BaseModel):
    """Envelope de error de Jira: `{"errorMessages": ["...", ...]}`."""

    model_config = ConfigDict(extra="ignore")

    error_messages: list[str] = Field(..., alias="errorMessages")


def build_async_client(
    settings: AppSettings | None = None,
    *,
    username: str | None = None,
    password: str | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando al host de Jira.

    Las credenciales explícitas tienen prioridad sobre las de `settings`.
    """

    settings = settings or AppSettings()
    username = username or settings.username
    password = password or settings.password

    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)

    auth = httpx.BasicAuth(username, password) if username and password else None
    return httpx.AsyncClient(
        base_url=settings.base_url,
        auth=auth,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def parse_error_envelope(body: str) -> list[str] | None:
    """Devuelve los `errorMessages` si `body` es el envelope de Jira, si no `None`."""

    try:
        envelope = JiraErrorResponse.model_validate_json(body)
    except (ValueError, ValidationError):
        # Sin envelope accionable: el llamador lo trata como fallo desconocido.
        return None
    return envelope.error_messages


async def make_request(
    invoke: Callable[[], Awaitable[httpx.Response]],
    *,
    context: str,
) -> Any:
    """Ejecuta una llamada y devuelve el JSON crudo o lanza un `RemoteError`.

    - Envelope de Jira reconocible -> `ServiceError` con los mensajes.
    - Error HTTP sin envelope -> `UnknownRemoteError` (causa encadenada).
    - Error de red/timeout -> `TransportError`.
    - Cualquier otro `httpx.RequestError` -> `UnknownRemoteError`.

    Sin reintentos: una llamada, un resultado.
    """

    logger.debug("Jira request: %s", context)
    try:
        response = await invoke()
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        messages = parse_error_envelope(exc.response.text)
        logger.debug("Jira request failed (%s): HTTP %s", context, status)
        if messages is not None:
            raise ServiceError(
                f"Jira rejected request [{context}].",
                messages,
                status_code=status,
            ) from exc
        raise UnknownRemoteError(
            "Failed when invoking Jira API.",
            status_code=status,
        ) from exc
    except httpx.TransportError as exc:
        logger.debug("Jira request failed (%s): %s", context, exc)
        raise TransportError(f"Network error while invoking Jira API [{context}].") from exc
    except httpx.RequestError as exc:
        # Redirecciones en bucle, cuerpo comprimido corrupto, etc.
        logger.debug("Jira request failed (%s): %r", context, exc)
        raise UnknownRemoteError("Failed when invoking Jira API.") from exc

    try:
        return response.json()
    except ValueError as exc:
        raise DecodeError(
            f"Jira returned a non-JSON response for [{context}].",
            [f"body: {response.text[:200]!r}"],
        ) from exc
