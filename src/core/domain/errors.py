"""Errores tipados del pipeline remoto.

Por qué una jerarquía explícita:
- La clasificación (red, decode, envelope de Jira, not-found) se hace una sola
  vez, en el punto donde falla la llamada remota.
- Las capas superiores deciden la política de recuperación por tipo/`kind`, no
  re-parseando mensajes.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class RemoteErrorKind(str, Enum):
    """Clasificación de un fallo remoto."""

    NOT_FOUND = "not_found"
    DECODE = "decode"
    TRANSPORT = "transport"
    SERVICE = "service"
    UNKNOWN = "unknown"


class RemoteError(Exception):
    """Base de todos los fallos de una operación remota.

    La causa original se conserva siempre vía `raise ... from exc`.
    """

    kind: RemoteErrorKind = RemoteErrorKind.UNKNOWN

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def retryable(self) -> bool:
        return False


class TransportError(RemoteError):
    """Fallo de red (conexión, lectura, timeout)."""

    kind = RemoteErrorKind.TRANSPORT

    @property
    def retryable(self) -> bool:
        return True


_RETRYABLE_STATUS = frozenset({429, 502, 503, 504})


class DecodeError(RemoteError):
    """La respuesta no encaja con el esquema esperado.

    `errors` conserva cada violación individual, en orden.
    """

    kind = RemoteErrorKind.DECODE

    def __init__(self, message: str, errors: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.errors: tuple[str, ...] = tuple(errors)

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        details = "\n".join(f"  - {error}" for error in self.errors)
        return f"{self.message}\n{details}"


class ServiceError(RemoteError):
    """Jira respondió con su envelope `{errorMessages: [...]}`."""

    kind = RemoteErrorKind.SERVICE

    def __init__(
        self,
        message: str,
        error_messages: Sequence[str],
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.error_messages: tuple[str, ...] = tuple(error_messages)
        self.status_code = status_code

    def has_message_prefix(self, prefix: str) -> bool:
        return any(message.startswith(prefix) for message in self.error_messages)

    @property
    def retryable(self) -> bool:
        return self.status_code in _RETRYABLE_STATUS

    def __str__(self) -> str:
        if not self.error_messages:
            return self.message
        return f"{self.message} ({'; '.join(self.error_messages)})"


class ProjectNotFoundError(ServiceError):
    """El proyecto no existe o el usuario no tiene visibilidad sobre él."""

    kind = RemoteErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str,
        project_key: str,
        error_messages: Sequence[str] = (),
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, error_messages, status_code=status_code)
        self.project_key = project_key

    @property
    def retryable(self) -> bool:
        return False


class UnknownRemoteError(RemoteError):
    """Fallo HTTP sin envelope reconocible."""

    kind = RemoteErrorKind.UNKNOWN

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.status_code in _RETRYABLE_STATUS


class ProjectAuditError(Exception):
    """Error de cara al usuario en el borde de la invocación."""

    def __init__(self, message: str, project_key: str) -> None:
        super().__init__(message)
        self.project_key = project_key


def describe_error_chain(error: BaseException) -> list[str]:
    """Mensajes de `error` y de toda su cadena de causas, del exterior al interior."""

    lines: list[str] = []
    current: BaseException | None = error
    seen: set[int] = set()
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        text = str(current) or type(current).__name__
        lines.append(text)
        current = current.__cause__ or current.__context__
    return lines
