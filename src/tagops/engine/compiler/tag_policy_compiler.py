"""Tag policy compilation service.

Runs one compilation pass -- label requirements, enforcement mode, document,
policy resource, target scope and binding -- and returns a
:class:`TagPolicyPlan` for the orchestration engine.  Any
:class:`~tagops.shared.exceptions.ConfigurationError` aborts the pass before
a plan exists, so a partially valid policy is never handed off.
"""
from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

import structlog
from pydantic import BaseModel, Field, model_validator

from tagops.config import StackConfig
from tagops.domain.entities.label_requirement import (
    DEFAULT_REQUIRED_TAGS,
    LabelRequirementSet,
)
from tagops.domain.entities.policy_document import (
    DEFAULT_POLICY_NAME,
    PolicyDocument,
    PolicyResource,
)
from tagops.domain.entities.scope_binding import (
    DEFAULT_ATTACHMENT_NAME,
    ScopeBindingRequest,
    resolve_target_scope,
)
from tagops.domain.value_objects.enforcement_mode import (
    EnforcementMode,
    ModeResolution,
    resolve_enforcement_mode,
)
from tagops.domain.value_objects.service_catalog import (
    DEFAULT_CATALOG,
    ResourceServiceCatalog,
)
from tagops.engine.compiler.document_compiler import (
    build_policy_resource,
    compile_policy_document,
)
from tagops.infrastructure.logging import compilation_context
from tagops.shared.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


class PlanDiagnostics(BaseModel):
    """Informational outputs of a compilation pass.

    Attributes:
        required_tag_keys: Tag keys in document order.
        mode: Resolved enforcement mode.
        supported_service_count: Number of services in the catalog.
        content_hash: SHA-256 of the canonical document JSON.
    """

    required_tag_keys: list[str] = Field(default_factory=list)
    mode: EnforcementMode
    supported_service_count: int = Field(ge=0)
    content_hash: str

    model_config = {"frozen": True}


class TagPolicyPlan(BaseModel):
    """A compiled policy resource and the binding that attaches it.

    The binding must reference the policy created in the same pass.
    """

    policy: PolicyResource
    binding: ScopeBindingRequest
    diagnostics: PlanDiagnostics

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _binding_references_policy(self) -> TagPolicyPlan:
        if self.binding.policy_reference != self.policy.reference:
            raise ConfigurationError(
                "Scope binding references a policy that is not part of this plan",
                context={
                    "policy_reference": self.binding.policy_reference,
                    "expected": self.policy.reference,
                },
            )
        return self

    def summary(self) -> dict[str, Any]:
        """Return a concise dictionary summary for logging."""
        return {
            "policy_name": self.policy.name,
            "target_scope": self.binding.target_scope,
            **self.diagnostics.model_dump(mode="json"),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "policy": self.policy.to_dict(),
            "attachment": self.binding.to_dict(),
            "diagnostics": self.diagnostics.model_dump(mode="json"),
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
# TagPolicyCompiler
# ---------------------------------------------------------------------------


class TagPolicyCompiler:
    """Compiles stack configuration into tag policy plans.

    Usage::

        compiler = TagPolicyCompiler()
        plan = compiler.compile(load_stack_config("stack.yaml"), mode="report")
        print(plan.to_json())
    """

    def __init__(
        self,
        catalog: ResourceServiceCatalog = DEFAULT_CATALOG,
        *,
        default_tags: Mapping[str, Sequence[str]] = DEFAULT_REQUIRED_TAGS,
        policy_name: str = DEFAULT_POLICY_NAME,
        attachment_name: str = DEFAULT_ATTACHMENT_NAME,
    ) -> None:
        self._catalog = catalog
        self._default_tags = default_tags
        self._policy_name = policy_name
        self._attachment_name = attachment_name

    @property
    def catalog(self) -> ResourceServiceCatalog:
        return self._catalog

    # -- steps --------------------------------------------------------------

    def requirements(self, config: StackConfig) -> LabelRequirementSet:
        return LabelRequirementSet.from_config(
            config.required_tags, default=self._default_tags
        )

    def resolve_mode(
        self, config: StackConfig, mode: str | EnforcementMode | None = None
    ) -> ModeResolution:
        """Resolve the mode; an explicit *mode* overrides the stack value."""
        return resolve_enforcement_mode(mode if mode is not None else config.enforcement_mode)

    def compile_document(
        self,
        config: StackConfig,
        *,
        mode: str | EnforcementMode | None = None,
    ) -> PolicyDocument:
        """Compile only the policy document (no target scope needed)."""
        requirements = self.requirements(config)
        resolution = self.resolve_mode(config, mode)
        return compile_policy_document(requirements, resolution, self._catalog)

    # -- full pass ----------------------------------------------------------

    def compile(
        self,
        config: StackConfig,
        *,
        mode: str | EnforcementMode | None = None,
        target_scope: str | None = None,
    ) -> TagPolicyPlan:
        """Compile *config* into a :class:`TagPolicyPlan`.

        Args:
            config: Stack configuration.
            mode: Explicit enforcement mode, overriding ``config``.
            target_scope: Explicit scope id, overriding ``config``.

        Raises:
            ConfigurationError: On any invalid input.  Nothing is returned
                for a partially valid configuration.
        """
        with compilation_context():
            requirements = self.requirements(config)
            resolution = self.resolve_mode(config, mode)
            document = compile_policy_document(requirements, resolution, self._catalog)
            policy = build_policy_resource(
                document, resolution, self._catalog, name=self._policy_name
            )

            scope = resolve_target_scope(
                target_scope if target_scope is not None else config.target_scope,
                config.organization_roots,
            )
            binding = ScopeBindingRequest(
                policy_reference=policy.reference,
                target_scope=scope,
                name=self._attachment_name,
            )

            plan = TagPolicyPlan(
                policy=policy,
                binding=binding,
                diagnostics=PlanDiagnostics(
                    required_tag_keys=requirements.keys(),
                    mode=resolution.mode,
                    supported_service_count=len(self._catalog),
                    content_hash=document.content_hash(),
                ),
            )
            logger.info(
                "tag_policy_compiled",
                blocks_operations=resolution.mode.blocks_operations,
                **plan.summary(),
            )
            return plan
