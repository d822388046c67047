"""Domain exceptions mapped to JSON error responses in ``main.py``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None

    def __str__(self) -> str:
        return self.message


class NotFoundOrForbidden(AppError):
    """Resource missing or owned by another company.

    Both cases share one message so a caller cannot probe for other
    tenants' records.
    """

    def __init__(self, message: str = "Praça não encontrada ou acesso negado.", details: Any | None = None) -> None:
        super().__init__(code="not_found_or_forbidden", message=message, status_code=404, details=details)


class DependencyViolation(AppError):
    """Delete refused because dependent rows still reference the record."""

    def __init__(
        self,
        message: str = "Registro possui vínculos (bilhetes, sorteios). Desative-o em vez de excluir.",
        details: Any | None = None,
    ) -> None:
        super().__init__(code="dependency_violation", message=message, status_code=409, details=details)


class MalformedSeriesValue(AppError):
    """A series value is not a string of decimal digits."""

    def __init__(self, value: Any, details: Any | None = None) -> None:
        super().__init__(
            code="malformed_series",
            message=f"Série inválida: {value!r}",
            status_code=422,
            details=details,
        )


class SeriesConflict(AppError):
    """Concurrent writers kept changing the series while cycling it."""

    def __init__(self, message: str = "A série foi alterada concorrentemente. Tente novamente.", details: Any | None = None) -> None:
        super().__init__(code="series_conflict", message=message, status_code=409, details=details)


class ValidationFailed(AppError):
    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class PermissionDenied(AppError):
    def __init__(self, message: str = "Acesso negado", details: Any | None = None) -> None:
        super().__init__(code="forbidden", message=message, status_code=403, details=details)
