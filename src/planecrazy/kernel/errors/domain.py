"""Domain errors – malformed commands and business rule violations."""

from __future__ import annotations

from typing import Any, Sequence

from planecrazy.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a domain rule is violated."""

    default_code = "domain.error"


class ValidationError(DomainError):
    """Command payload does not meet validation rules.

    Raised (or returned) before any aggregate is touched, so it never
    produces an event.  ``errors`` lists every individual failure.
    """

    default_code = "command.validation_failed"

    def __init__(
        self,
        message: str,
        *,
        errors: Sequence[str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[str] = list(errors or [])

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class InvalidStateError(DomainError):
    """A well-formed command is illegal given the aggregate's current state.

    ``state`` names the state the aggregate was in and ``operation`` the
    command method that was refused.
    """

    default_code = "command.invalid_state"

    def __init__(
        self,
        message: str,
        *,
        state: str | None = None,
        operation: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.state = state
        self.operation = operation

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["state"] = self.state
        base["operation"] = self.operation
        return base


__all__ = [
    "DomainError",
    "InvalidStateError",
    "ValidationError",
]
