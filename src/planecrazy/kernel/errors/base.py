"""Kernel errors – BaseError, root of the planecrazy error hierarchy.

Error codes are dotted and namespaced by the component that raises them
(``command.invalid_state``, ``event_store.write_failed``), the same way log
event names are, so a rejected command or failed append can be matched to
its log line by code.
"""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Root of the error hierarchy.

    Args:
        message: Human-readable description.
        code: Dotted machine-readable code (defaults to ``default_code``).
        detail: Extra JSON-serialisable context.
        cause: Underlying exception, also chained as ``__cause__``.
    """

    default_code: str = "planecrazy.error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def namespace(self) -> str:
        """Component prefix of :attr:`code` (``"event_store"``, ``"command"``)."""
        return self.code.partition(".")[0]

    def log_fields(self) -> dict[str, Any]:
        """Keyword fields for a structlog call describing this error."""
        fields: dict[str, Any] = {"error_code": self.code, "error": self.message, **self.detail}
        if self.cause is not None:
            fields["cause"] = repr(self.cause)
        return fields

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code}: {self.message!r})"


__all__ = ["BaseError"]
