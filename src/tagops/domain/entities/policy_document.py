"""Tag policy document and policy resource entities.

The :class:`PolicyDocument` is the compiled value handed to the governance
system.  Its JSON rendering is a wire contract: field names, nesting and the
``@@assign`` operator must be reproduced exactly, and rendering the same
document twice must produce identical bytes because the orchestration engine
diffs the content to decide whether an update is needed.
"""
from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Wire vocabulary
# ---------------------------------------------------------------------------
ASSIGN_OPERATOR: str = "@@assign"
TAG_KEY_FIELD: str = "tag_key"
TAG_VALUE_FIELD: str = "tag_value"
TAGS_ROOT: str = "tags"

TAG_POLICY_TYPE: str = "TAG_POLICY"
DEFAULT_POLICY_NAME: str = "required-tags-policy"


@dataclass(frozen=True, slots=True)
class PolicyEntry:
    """Compiled rule for a single required tag."""

    tag_key: str
    applicability_field: str
    applies_to: tuple[str, ...]
    tag_values: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        entry: dict[str, Any] = {TAG_KEY_FIELD: {ASSIGN_OPERATOR: self.tag_key}}
        if self.tag_values:
            entry[TAG_VALUE_FIELD] = {ASSIGN_OPERATOR: list(self.tag_values)}
        entry[self.applicability_field] = {ASSIGN_OPERATOR: list(self.applies_to)}
        return entry


@dataclass(frozen=True, slots=True)
class PolicyDocument:
    """Ordered collection of compiled tag rules."""

    entries: tuple[PolicyEntry, ...]

    def to_dict(self) -> dict[str, Any]:
        """Return the nested wire structure wrapped under ``"tags"``."""
        return {TAGS_ROOT: {e.tag_key: e.to_dict() for e in self.entries}}

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize the document.

        ``indent=2`` is the canonical ``content`` form stored on the policy
        resource.  ``indent=None`` gives the compact single-line form.
        """
        if indent is None:
            return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def content_hash(self) -> str:
        """Return the SHA-256 hex digest of the canonical JSON rendering."""
        return hashlib.sha256(self.to_json().encode("utf-8")).hexdigest()

    def tag_keys(self) -> list[str]:
        return [e.tag_key for e in self.entries]


class PolicyResource(BaseModel):
    """A policy document wrapped in the governance system's resource metadata.

    Attributes:
        name: Logical and physical name of the policy resource.
        description: Human-readable description including mode and coverage.
        policy_type: Governance policy type, always ``TAG_POLICY``.
        content: The document serialized with 2-space indentation.
        document: Parsed form of *content* for in-process consumers.
    """

    name: str = Field(default=DEFAULT_POLICY_NAME, min_length=1)
    description: str = ""
    policy_type: str = Field(default=TAG_POLICY_TYPE, serialization_alias="type")
    content: str

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def reference(self) -> str:
        """Placeholder for the identifier assigned once the resource exists."""
        return f"{self.name}.id"

    @property
    def document(self) -> dict[str, Any]:
        return json.loads(self.content)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
