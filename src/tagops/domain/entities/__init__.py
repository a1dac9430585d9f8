from tagops.domain.entities.label_requirement import (
    DEFAULT_REQUIRED_TAGS,
    LabelRequirement,
    LabelRequirementSet,
)
from tagops.domain.entities.policy_document import (
    DEFAULT_POLICY_NAME,
    TAG_POLICY_TYPE,
    PolicyDocument,
    PolicyEntry,
    PolicyResource,
)
from tagops.domain.entities.scope_binding import (
    DEFAULT_ATTACHMENT_NAME,
    ScopeBindingRequest,
    resolve_target_scope,
)

__all__ = [
    "DEFAULT_ATTACHMENT_NAME",
    "DEFAULT_POLICY_NAME",
    "DEFAULT_REQUIRED_TAGS",
    "TAG_POLICY_TYPE",
    "LabelRequirement",
    "LabelRequirementSet",
    "PolicyDocument",
    "PolicyEntry",
    "PolicyResource",
    "ScopeBindingRequest",
    "resolve_target_scope",
]
