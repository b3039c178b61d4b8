"""Resultados de validación y sus combinadores.

Dos formas de componer reglas:
- `accumulate`: reglas independientes; se reportan TODOS los fallos.
- `and_then`: reglas dependientes; el primer fallo corta la cadena.

Validar nunca lanza excepciones: el fallo es un valor (`Invalid`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    @property
    def reasons(self) -> tuple[str, ...]:
        return ()


@dataclass(frozen=True)
class Invalid:
    reasons: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.reasons:
            raise ValueError("Invalid requires at least one reason")

    @property
    def ok(self) -> bool:
        return False


Validated = Union[Valid[T], Invalid]


def valid(value: T) -> Valid[T]:
    return Valid(value)


def invalid(*reasons: str) -> Invalid:
    return Invalid(tuple(reasons))


def check(condition: bool, value: T, reason: str) -> Validated[T]:
    return Valid(value) if condition else invalid(reason)


def accumulate(value: T, *checks: Validated[object]) -> Validated[T]:
    """Combina reglas independientes sumando las razones de todas las que fallan."""

    reasons: list[str] = []
    for result in checks:
        if isinstance(result, Invalid):
            reasons.extend(result.reasons)
    return Invalid(tuple(reasons)) if reasons else Valid(value)


def and_then(result: Validated[T], step: Callable[[T], Validated[U]]) -> Validated[U]:
    """Encadena una regla dependiente: solo se evalúa si la anterior pasó."""

    if isinstance(result, Invalid):
        return result
    return step(result.value)
