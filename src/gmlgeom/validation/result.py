"""
Validation Result
=================
Append-only sink for the diagnostics of one geometry.

A result is created per validated geometry and must not be shared between
concurrent validation calls.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Optional, Sequence

from gmlgeom.validation.messages import format_message

if TYPE_CHECKING:
    from gmlgeom.validation.context import ElementContext


class Severity(StrEnum):
    ERROR = "ERROR"
    WARNING = "WARNING"


@dataclass(frozen=True)
class Diagnostic:
    element_id: Optional[str]
    message_key: str
    text: str
    coordinate: Optional[tuple[float, ...]] = None
    severity: Severity = Severity.ERROR


class ValidationResult:
    """
    Ordered diagnostics of one validation call.

    `fail_silently()` marks that a check could not be evaluated, which is
    different from "evaluated and failed": such a result is unknown, not invalid.
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []
        self._failed_silently = False

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(errors={len(self.errors)}, "
                f"warnings={len(self.warnings)}, failed_silently={self._failed_silently})")

    def _add(
        self,
        severity: Severity,
        context: ElementContext,
        message_key: str,
        args: Sequence[object],
        coordinate: Optional[Sequence[float]]
    ) -> Diagnostic:
        coord = tuple(float(v) for v in coordinate) if coordinate is not None else None
        diagnostic = Diagnostic(
            element_id=context.element_id,
            message_key=message_key,
            text=format_message(message_key, *args, coordinate=coord),
            coordinate=coord,
            severity=severity,
        )
        self._diagnostics.append(diagnostic)
        return diagnostic

    def add_error(
        self,
        context: ElementContext,
        message_key: str,
        *args: object,
        coordinate: Optional[Sequence[float]] = None
    ) -> Diagnostic:
        """Record a defect found while evaluating the geometry."""
        return self._add(Severity.ERROR, context, message_key, args, coordinate)

    def add_warning(
        self,
        context: ElementContext,
        message_key: str,
        *args: object,
        coordinate: Optional[Sequence[float]] = None
    ) -> Diagnostic:
        """Record something surprising that does not make the geometry invalid."""
        return self._add(Severity.WARNING, context, message_key, args, coordinate)

    def fail_silently(self) -> None:
        """Mark the outcome as unknown (a check could not be evaluated)."""
        self._failed_silently = True

    @property
    def failed_silently(self) -> bool:
        return self._failed_silently

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._diagnostics if d.severity == Severity.WARNING]

    @property
    def is_valid(self) -> bool:
        """True when no error was recorded; check `failed_silently` for unknown outcomes."""
        return not self.errors
