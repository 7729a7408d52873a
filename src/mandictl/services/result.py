"""ServiceResult and ServiceError, the contract between services and callers.

INVARIANT: Every operation on :class:`~mandictl.services.assistant.MandiAssistant`
returns ServiceResult. The CLI and any other caller consume this type.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, ValidationError


class ErrorCode(StrEnum):
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_STATE = "INVALID_STATE"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for assistant operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"negotiate"``).
        data: Operation-specific payload on success.
        warnings: Advisory notes such as low translation confidence.
        error: Structured error if ``ok`` is False.
        meta: Telemetry span tree when ``--verbose`` is on.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        error = ServiceError(code=str(code), message=message, detail=detail)
        return cls(ok=False, op=op, error=error)

    @classmethod
    def invalid(cls, op: str, exc: ValidationError) -> ServiceResult:
        """VALIDATION_ERROR listing each rejected field as ``{"loc", "msg"}``."""
        errors = [
            {"loc": ".".join(str(p) for p in e.get("loc", ())), "msg": e.get("msg", "")}
            for e in exc.errors()
        ]
        return cls.failure(op, ErrorCode.VALIDATION_ERROR, "Invalid input", errors=errors)

    @property
    def error_code(self) -> str | None:
        return self.error.code if self.error else None
