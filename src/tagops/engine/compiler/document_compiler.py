"""Policy document compiler.

Turns a validated :class:`LabelRequirementSet` into the governance system's
tag policy document.  The compiler is a pure function: it performs no I/O,
does not re-validate its inputs, and produces identical output for identical
inputs.
"""
from __future__ import annotations

from tagops.domain.entities.label_requirement import LabelRequirementSet
from tagops.domain.entities.policy_document import (
    DEFAULT_POLICY_NAME,
    TAG_POLICY_TYPE,
    PolicyDocument,
    PolicyEntry,
    PolicyResource,
)
from tagops.domain.value_objects.enforcement_mode import ModeResolution
from tagops.domain.value_objects.service_catalog import ResourceServiceCatalog


def compile_policy_document(
    requirements: LabelRequirementSet,
    resolution: ModeResolution,
    catalog: ResourceServiceCatalog,
) -> PolicyDocument:
    """Compile one policy entry per required tag, in set order.

    ``tag_value`` is only emitted for restricted tags; an unrestricted tag
    never produces an empty allow-list.  The applicability tokens are
    computed once and shared by every entry.
    """
    applies_to = tuple(catalog.tokens())
    entries = tuple(
        PolicyEntry(
            tag_key=requirement.name,
            applicability_field=resolution.applicability_field,
            applies_to=applies_to,
            tag_values=requirement.allowed_values,
        )
        for requirement in requirements
    )
    return PolicyDocument(entries=entries)


def describe_policy(resolution: ModeResolution, catalog: ResourceServiceCatalog) -> str:
    return (
        f"Tag policy ({resolution.mode.value} mode) for required tags "
        f"across {len(catalog)} AWS services"
    )


def build_policy_resource(
    document: PolicyDocument,
    resolution: ModeResolution,
    catalog: ResourceServiceCatalog,
    *,
    name: str = DEFAULT_POLICY_NAME,
) -> PolicyResource:
    """Wrap *document* in the policy resource handed to the orchestration engine."""
    return PolicyResource(
        name=name,
        description=describe_policy(resolution, catalog),
        policy_type=TAG_POLICY_TYPE,
        content=document.to_json(indent=2),
    )
