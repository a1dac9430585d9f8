"""Scope binding entities -- where a compiled tag policy gets attached.

A :class:`ScopeBindingRequest` is a plan object.  It names the policy by a
placeholder reference and the organization root or unit it should be
attached to; the orchestration engine performs the actual attachment after
it has created the policy resource.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from tagops.shared.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

DEFAULT_ATTACHMENT_NAME: str = "required-tags-attachment"


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


@dataclass(frozen=True, slots=True)
class ScopeBindingRequest:
    """Request to attach a policy to an organizational scope.

    Attributes:
        policy_reference: Opaque reference to the policy resource, resolved
            by the orchestration engine (e.g. ``"required-tags-policy.id"``).
        target_scope: Organization root (``r-...``) or unit (``ou-...``) id.
        name: Name of the attachment resource.
    """

    policy_reference: str
    target_scope: str
    name: str = DEFAULT_ATTACHMENT_NAME

    def __post_init__(self) -> None:
        if _is_blank(self.target_scope):
            raise ConfigurationError(
                "Target scope must be a non-empty organization root or unit id",
                context={"target_scope": self.target_scope},
            )
        if _is_blank(self.policy_reference):
            raise ConfigurationError(
                "Policy reference must be non-empty",
                context={"policy_reference": self.policy_reference},
            )
        if _is_blank(self.name):
            raise ConfigurationError(
                "Attachment name must be non-empty",
                context={"name": self.name},
            )

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "policy_reference": self.policy_reference,
            "target_scope": self.target_scope,
        }


def resolve_target_scope(
    override: str | None = None,
    organization_roots: Sequence[str] | None = None,
) -> str:
    """Pick the scope a policy is attached to.

    An explicit, non-blank *override* wins.  Otherwise the first organization
    root is used, which applies the policy to every account in the
    organization.

    Raises:
        ConfigurationError: When neither an override nor a root is available.
    """
    if override is not None:
        if _is_blank(override):
            raise ConfigurationError(
                "Target scope override must be non-empty",
                context={"target_scope": override},
            )
        logger.debug("target_scope_resolved", source="override", target_scope=override)
        return override

    roots = list(organization_roots or [])
    if not roots:
        raise ConfigurationError(
            "No target scope: set targetScope or provide organization roots",
            context={"organization_roots": roots},
        )
    root = roots[0]
    if _is_blank(root):
        raise ConfigurationError(
            "Organization root id must be non-empty",
            context={"organization_roots": roots},
        )
    logger.debug(
        "target_scope_resolved",
        source="organization_root",
        target_scope=root,
        root_count=len(roots),
    )
    return root
