"""Enforcement mode value objects.

A tag policy either *reports* missing or invalid tags without blocking the
operation, or *enforces* them by rejecting non-compliant operations.  The
mode only decides the name of the applicability field in the compiled
document; the services listed under that field are identical in both modes.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass

import structlog

from tagops.shared.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Applicability field names -- wire contract with the governance system
# ---------------------------------------------------------------------------
REPORT_FIELD: str = "*@@report_required_tag_for*"
ENFORCE_FIELD: str = "enforced_for"

_APPLICABILITY_FIELDS: dict[str, str] = {
    "report": REPORT_FIELD,
    "enforce": ENFORCE_FIELD,
}


class EnforcementMode(str, enum.Enum):
    """How the governance system reacts to a tag policy violation.

    Values:
        REPORT: Observe only. Violations are surfaced, operations proceed.
        ENFORCE: Violations block the operation.
    """

    REPORT = "report"
    ENFORCE = "enforce"

    @property
    def applicability_field(self) -> str:
        """Return the document field that lists the governed services."""
        return _APPLICABILITY_FIELDS[self.value]

    @property
    def blocks_operations(self) -> bool:
        """Return True when non-compliant operations are rejected."""
        return self is EnforcementMode.ENFORCE


DEFAULT_MODE: EnforcementMode = EnforcementMode.REPORT


@dataclass(frozen=True, slots=True)
class ModeResolution:
    """A resolved enforcement mode paired with its applicability field."""

    mode: EnforcementMode
    applicability_field: str

    @classmethod
    def for_mode(cls, mode: EnforcementMode) -> ModeResolution:
        return cls(mode=mode, applicability_field=mode.applicability_field)


def resolve_enforcement_mode(raw: str | EnforcementMode | None) -> ModeResolution:
    """Resolve a raw configuration value into a :class:`ModeResolution`.

    ``None`` means the value was never configured and resolves to ``report``.
    Every other value must be one of the literal mode names; there is no case
    folding, trimming or fallback, so a typo never turns into either mode.

    Raises:
        ConfigurationError: If *raw* is not ``None``, ``"report"`` or
            ``"enforce"``.
    """
    if raw is None:
        logger.debug("enforcement_mode_defaulted", mode=DEFAULT_MODE.value)
        return ModeResolution.for_mode(DEFAULT_MODE)

    if isinstance(raw, EnforcementMode):
        return ModeResolution.for_mode(raw)

    if isinstance(raw, str) and raw in _APPLICABILITY_FIELDS:
        resolution = ModeResolution.for_mode(EnforcementMode(raw))
        logger.debug(
            "enforcement_mode_resolved",
            mode=resolution.mode.value,
            applicability_field=resolution.applicability_field,
        )
        return resolution

    valid = ", ".join(m.value for m in EnforcementMode)
    raise ConfigurationError(
        f"Unknown enforcement mode {raw!r}. Valid values: {valid}",
        context={"enforcement_mode": raw, "valid_modes": [m.value for m in EnforcementMode]},
    )
