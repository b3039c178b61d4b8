"""Decodificación de respuestas JSON a modelos del dominio.

Función pura de (esquema, payload): sin I/O y determinista. Todas las
violaciones de forma se reportan juntas en un único `DecodeError`.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, Union, overload

from pydantic import BaseModel, TypeAdapter, ValidationError

from core.domain.errors import DecodeError

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")

MessageBuilder = Union[str, Callable[[list[str]], str]]


def format_validation_errors(error: ValidationError) -> list[str]:
    """Convierte los errores de pydantic en líneas legibles `ruta: mensaje`."""

    lines: list[str] = []
    for item in error.errors(include_url=False):
        path = ".".join(str(part) for part in item["loc"]) or "<root>"
        lines.append(f"{path}: {item['msg']}")
    return lines


@overload
def decode(schema: type[M], payload: Any, *, message: MessageBuilder) -> M: ...


@overload
def decode(schema: TypeAdapter[T], payload: Any, *, message: MessageBuilder) -> T: ...


def decode(schema: Any, payload: Any, *, message: MessageBuilder) -> Any:
    """Valida `payload` contra `schema` (modelo o `TypeAdapter`).

    `message` da el contexto de la operación (proyecto, rol, board...) para el
    mensaje principal; el detalle conserva cada violación en orden.
    """

    try:
        if isinstance(schema, TypeAdapter):
            return schema.validate_python(payload)
        return schema.model_validate(payload)
    except ValidationError as exc:
        errors = format_validation_errors(exc)
        text = message(errors) if callable(message) else message
        raise DecodeError(text, errors) from exc
