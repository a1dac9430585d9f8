"""Configuration for the tag-policy compiler.

Two layers feed a compilation:

* :class:`Settings` -- process settings loaded from ``TAGOPS_*`` environment
  variables (and an optional ``.env`` file) via pydantic-settings.
* :class:`StackConfig` -- the per-stack policy input (required tags,
  enforcement mode, target scope) read from a YAML stack file.

CLI flags override settings, and settings override the stack file.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from tagops.domain.entities.policy_document import DEFAULT_POLICY_NAME
from tagops.domain.entities.scope_binding import DEFAULT_ATTACHMENT_NAME


class Settings(BaseSettings):
    """Tag-policy compiler settings loaded from environment variables."""

    log_level: str = "info"
    log_json: bool = False
    log_file: str | None = None

    # Policy input
    config_file: str | None = None
    enforcement_mode: str | None = None
    target_scope: str | None = None

    # Resource naming
    policy_name: str = DEFAULT_POLICY_NAME
    attachment_name: str = DEFAULT_ATTACHMENT_NAME

    model_config = {"env_prefix": "TAGOPS_", "env_file": ".env", "extra": "ignore"}


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()


class StackConfig(BaseModel):
    """Policy input for a single stack.

    Attributes:
        required_tags: Tag name to allowed values.  An empty or missing list
            means any value is accepted.  ``None`` selects the built-in
            default tags.
        enforcement_mode: ``"report"`` or ``"enforce"``; ``None`` means
            ``report``.
        target_scope: Explicit organization root or unit id.
        organization_roots: Known organization root ids; the first one is
            used when *target_scope* is not set.
    """

    required_tags: dict[str, Any] | None = Field(default=None, alias="requiredTags")
    enforcement_mode: str | None = Field(default=None, alias="enforcementMode")
    target_scope: str | None = Field(default=None, alias="targetScope")
    organization_roots: list[str] = Field(default_factory=list, alias="organizationRoots")

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}
