"""Exception hierarchy for the tag-policy compiler.

Every exception carries a machine-readable ``error_code``, a ``severity``
indicator, and an arbitrary ``context`` dict for structured logging.  The CLI
maps these exceptions to process exit codes.

Configuration problems are always fatal: a partially valid tag policy applied
at organization scope can block resource creation or leave gaps in coverage,
so no document is produced once a :class:`ConfigurationError` is raised.
"""
from __future__ import annotations

from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Severity levels
# ---------------------------------------------------------------------------

class Severity(str, Enum):
    """Severity levels for tag-policy exceptions."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class TagOpsError(Exception):
    """Root exception for every tag-policy failure.

    Attributes:
        message:    Human-readable description.
        error_code: Machine-readable code (e.g. ``"TAG_CONFIG_ERROR"``).
        severity:   Impact severity.
        context:    Arbitrary key-value context for structured logging.
    """

    def __init__(
        self,
        message: str = "Tag policy error",
        error_code: str = "TAGOPS_ERROR",
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.context: dict[str, Any] = context or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"error_code={self.error_code!r}, "
            f"severity={self.severity.value!r}, "
            f"message={self.message!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise the exception for CLI error output and log events."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "context": self.context,
        }


# ---------------------------------------------------------------------------
# Configuration exceptions
# ---------------------------------------------------------------------------

class ConfigurationError(TagOpsError):
    """Raised for malformed or ambiguous tag-policy input.

    Covers empty or duplicate label names, empty allowed values, unknown
    enforcement modes, missing target scopes and unreadable stack files.
    """

    def __init__(self, message: str = "Configuration error", **kwargs: Any) -> None:
        super().__init__(
            message,
            error_code=kwargs.pop("error_code", "TAG_CONFIG_ERROR"),
            severity=kwargs.pop("severity", Severity.CRITICAL),
            **kwargs,
        )

    @classmethod
    def for_label(cls, label: Any, reason: str) -> ConfigurationError:
        """Build an error that names the offending label and the reason."""
        return cls(
            f"Invalid required tag {label!r}: {reason}",
            context={"label": label, "reason": reason},
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "Severity",
    "TagOpsError",
    "ConfigurationError",
]
