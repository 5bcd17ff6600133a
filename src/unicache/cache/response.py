"""
unicache — Cache Result Envelope

Every adapter operation resolves to a CacheResult. Successful results carry
their payload under ``data["response"]``; failed results carry a stable
call-site code, an ErrorCode category and a human-readable message.
"""

from dataclasses import dataclass, field
from typing import Any

from ..errors import ErrorCode


@dataclass(frozen=True)
class CacheResult:
    """Uniform success/failure wrapper returned by cache operations."""

    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error_code: str | None = None
    error_kind: ErrorCode | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, response: Any) -> "CacheResult":
        """Build a successful result wrapping ``response``."""
        return cls(success=True, data={"response": response})

    @classmethod
    def fail(
        cls,
        error_code: str,
        error_kind: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CacheResult":
        """Build a failed result."""
        return cls(
            success=False,
            error_code=error_code,
            error_kind=error_kind,
            message=message,
            details=details or {},
        )

    def is_success(self) -> bool:
        return self.success

    def is_failure(self) -> bool:
        return not self.success

    @property
    def value(self) -> Any:
        """Payload of a successful result (None for failures)."""
        return self.data.get("response")

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the result to a plain dictionary.

        Example:
            >>> CacheResult.ok("v").to_dict()
            {'success': True, 'data': {'response': 'v'}}
        """
        if self.success:
            return {"success": True, "data": dict(self.data)}
        return {
            "success": False,
            "error_code": self.error_code,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "message": self.message,
            "details": dict(self.details),
        }
