"""Result object returned by application services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class OperationResult:
    """Outcome of a service call.

    Services never raise for expected failures (missing rows, forbidden
    access, store errors); they return a failed result instead.

    Attributes:
        success: Whether the operation completed.
        message: Human-readable summary, shown to the user.
        error: Machine-readable failure code ("not_found", "forbidden",
            "invalid", "conflict", "db"), None on success.
        data: Payload of a successful call.
    """

    success: bool
    message: str = ""
    error: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str = "", **data: Any) -> OperationResult:
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: str, message: str) -> OperationResult:
        return cls(success=False, message=message, error=error)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.error is not None:
            result["error"] = self.error
        result.update(self.data)
        return result
