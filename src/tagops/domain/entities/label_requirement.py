"""Label requirement entities -- the tags every governed resource must carry.

A :class:`LabelRequirement` names a required tag key and, optionally, the
exact values that key may hold.  An empty allow-list means *any* non-empty
value is accepted while the tag itself stays mandatory.

A :class:`LabelRequirementSet` is built once from raw configuration, validated
as a whole, and never mutated afterwards.  Validation fails fast: the first
invalid label rejects the entire set.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from tagops.shared.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Built-in default -- used when the configuration supplies no required tags.
# ---------------------------------------------------------------------------
DEFAULT_REQUIRED_TAGS: dict[str, list[str]] = {
    "Environment": ["Development", "Staging", "Production"],
    "Owner": [],
    "CostCenter": [],
    "Project": [],
}

RawRequiredTags = Mapping[str, Sequence[str]] | Iterable[tuple[str, Sequence[str]]]


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


@dataclass(frozen=True, slots=True)
class LabelRequirement:
    """A required tag key with an optional allow-list of values.

    Attributes:
        name: Tag key, emitted verbatim (e.g. ``"Environment"``).
        allowed_values: Permitted values in emission order.  Empty means the
            tag is required but unrestricted.
    """

    name: str
    allowed_values: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if _is_blank(self.name):
            raise ConfigurationError.for_label(
                self.name, "label name must be a non-empty string"
            )
        values = self.allowed_values
        if isinstance(values, (str, bytes)) or not isinstance(values, (list, tuple)):
            raise ConfigurationError.for_label(
                self.name,
                f"allowed values must be a list of strings, got {type(values).__name__}",
            )
        for value in values:
            if _is_blank(value):
                raise ConfigurationError.for_label(
                    self.name,
                    f"allowed value {value!r} must be a non-empty string",
                )
        object.__setattr__(self, "allowed_values", tuple(values))

    @property
    def is_restricted(self) -> bool:
        """Return True when only the listed values are accepted."""
        return len(self.allowed_values) > 0


@dataclass(frozen=True, slots=True)
class LabelRequirementSet:
    """Ordered, immutable collection of uniquely named label requirements.

    Iteration order follows the raw configuration and only affects the
    readability of the compiled document.
    """

    requirements: tuple[LabelRequirement, ...]

    def __post_init__(self) -> None:
        requirements = tuple(self.requirements)
        seen: set[str] = set()
        for requirement in requirements:
            if requirement.name in seen:
                raise ConfigurationError.for_label(
                    requirement.name, "label name is duplicated"
                )
            seen.add(requirement.name)
        object.__setattr__(self, "requirements", requirements)

    def __iter__(self) -> Iterator[LabelRequirement]:
        return iter(self.requirements)

    def __len__(self) -> int:
        return len(self.requirements)

    def keys(self) -> list[str]:
        """Return the label names in order."""
        return [r.name for r in self.requirements]

    def get(self, name: str) -> LabelRequirement | None:
        for requirement in self.requirements:
            if requirement.name == name:
                return requirement
        return None

    # -- construction -------------------------------------------------------

    @classmethod
    def from_config(
        cls,
        raw: RawRequiredTags | None,
        default: Mapping[str, Sequence[str]] = DEFAULT_REQUIRED_TAGS,
    ) -> LabelRequirementSet:
        """Build a validated set from raw configuration.

        Args:
            raw: Mapping of label name to allowed values, or an iterable of
                ``(name, values)`` pairs.  Pairs let callers surface
                duplicate names that a mapping would silently collapse.
                ``None`` or an empty input selects *default*.
            default: Fallback used when *raw* is empty.

        Raises:
            ConfigurationError: On the first empty or duplicated label name,
                or the first empty allowed value.
        """
        pairs = _as_pairs(raw)
        source = "config"
        if not pairs:
            pairs = _as_pairs(default)
            source = "default"

        requirements: list[LabelRequirement] = []
        seen: set[str] = set()
        for name, values in pairs:
            if isinstance(name, str) and name in seen:
                raise ConfigurationError.for_label(name, "label name is duplicated")
            if values is None:
                values = ()
            requirements.append(LabelRequirement(name=name, allowed_values=values))
            seen.add(name)

        label_set = cls(tuple(requirements))
        logger.debug(
            "label_requirements_built",
            source=source,
            labels=label_set.keys(),
            restricted=[r.name for r in label_set if r.is_restricted],
        )
        return label_set


def _as_pairs(raw: RawRequiredTags | None) -> list[tuple[Any, Any]]:
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        return list(raw.items())
    if isinstance(raw, (str, bytes)):
        raise ConfigurationError(
            "Required tags must be a mapping of tag name to allowed values",
            context={"required_tags": raw},
        )
    pairs: list[tuple[Any, Any]] = []
    for item in raw:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise ConfigurationError(
                f"Required tag entry {item!r} must be a (name, values) pair",
                context={"entry": repr(item)},
            )
        pairs.append((item[0], item[1]))
    return pairs
