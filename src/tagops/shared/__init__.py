"""Shared kernel -- exceptions used across every layer."""
from __future__ import annotations

from tagops.shared.exceptions import ConfigurationError, Severity, TagOpsError

__all__ = ["ConfigurationError", "Severity", "TagOpsError"]
