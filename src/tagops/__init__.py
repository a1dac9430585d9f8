"""eco-tagops -- organization tag-policy compiler.

Compiles required-tag configuration into a tag policy document, selects
report or enforce mode, and plans the attachment of the policy to an
organization root or unit.
"""
from __future__ import annotations

from tagops.domain.entities import (
    LabelRequirement,
    LabelRequirementSet,
    PolicyDocument,
    PolicyResource,
    ScopeBindingRequest,
    resolve_target_scope,
)
from tagops.domain.value_objects import (
    DEFAULT_CATALOG,
    EnforcementMode,
    ModeResolution,
    ResourceServiceCatalog,
    resolve_enforcement_mode,
)
from tagops.engine.compiler import (
    TagPolicyCompiler,
    TagPolicyPlan,
    build_policy_resource,
    compile_policy_document,
)
from tagops.shared.exceptions import ConfigurationError, TagOpsError

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_CATALOG",
    "ConfigurationError",
    "EnforcementMode",
    "LabelRequirement",
    "LabelRequirementSet",
    "ModeResolution",
    "PolicyDocument",
    "PolicyResource",
    "ResourceServiceCatalog",
    "ScopeBindingRequest",
    "TagOpsError",
    "TagPolicyCompiler",
    "TagPolicyPlan",
    "build_policy_resource",
    "compile_policy_document",
    "resolve_enforcement_mode",
    "resolve_target_scope",
]
