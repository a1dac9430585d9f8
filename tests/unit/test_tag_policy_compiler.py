"""Test the tag policy compilation service and plan model."""

import json

import pytest

from tagops.config import StackConfig
from tagops.domain.entities.scope_binding import ScopeBindingRequest
from tagops.domain.value_objects.enforcement_mode import EnforcementMode
from tagops.domain.value_objects.service_catalog import ResourceServiceCatalog
from tagops.engine.compiler.tag_policy_compiler import (
    PlanDiagnostics,
    TagPolicyCompiler,
    TagPolicyPlan,
)
from tagops.shared.exceptions import ConfigurationError


@pytest.fixture
def compiler():
    return TagPolicyCompiler(ResourceServiceCatalog(("ec2", "s3")))


@pytest.fixture
def config():
    return StackConfig(
        required_tags={"Environment": ["Dev", "Prod"], "Owner": []},
        organization_roots=["r-root"],
    )


def test_compile_plan_defaults(compiler, config):
    plan = compiler.compile(config)
    assert plan.policy.name == "required-tags-policy"
    assert plan.binding.target_scope == "r-root"
    assert plan.binding.policy_reference == plan.policy.reference
    assert plan.diagnostics.mode == EnforcementMode.REPORT
    assert plan.diagnostics.required_tag_keys == ["Environment", "Owner"]
    assert plan.diagnostics.supported_service_count == 2


def test_compile_mode_argument_overrides_config(compiler):
    cfg = StackConfig(enforcement_mode="report", target_scope="r-x")
    plan = compiler.compile(cfg, mode="enforce")
    assert plan.diagnostics.mode == EnforcementMode.ENFORCE
    assert "enforced_for" in plan.policy.content


def test_compile_uses_config_mode(compiler):
    plan = compiler.compile(StackConfig(enforcement_mode="enforce", target_scope="r-x"))
    assert plan.diagnostics.mode == EnforcementMode.ENFORCE


def test_compile_target_scope_precedence(compiler):
    cfg = StackConfig(target_scope="ou-config", organization_roots=["r-root"])
    assert compiler.compile(cfg).binding.target_scope == "ou-config"
    assert compiler.compile(cfg, target_scope="ou-flag").binding.target_scope == "ou-flag"


def test_compile_empty_config_uses_default_tags(compiler):
    plan = compiler.compile(StackConfig(target_scope="r-x"))
    assert plan.diagnostics.required_tag_keys == ["Environment", "Owner", "CostCenter", "Project"]
    tags = plan.policy.document["tags"]
    assert tags["Environment"]["tag_value"]["@@assign"] == ["Development", "Staging", "Production"]
    assert "tag_value" not in tags["Project"]


def test_compile_custom_default_tags():
    compiler = TagPolicyCompiler(default_tags={"Team": []})
    plan = compiler.compile(StackConfig(target_scope="r-x"))
    assert plan.diagnostics.required_tag_keys == ["Team"]
    assert plan.diagnostics.supported_service_count == 44


def test_compile_rejects_bad_mode(compiler, config):
    with pytest.raises(ConfigurationError, match="enforcd"):
        compiler.compile(config, mode="enforcd")


def test_compile_rejects_bad_labels(compiler):
    cfg = StackConfig(required_tags={"Owner": [""]}, target_scope="r-x")
    with pytest.raises(ConfigurationError, match="Owner"):
        compiler.compile(cfg)


def test_compile_without_scope_fails(compiler):
    with pytest.raises(ConfigurationError, match="No target scope"):
        compiler.compile(StackConfig(required_tags={"Owner": []}))


def test_compile_is_deterministic(compiler, config):
    assert compiler.compile(config).to_json() == compiler.compile(config).to_json()


def test_compile_document_needs_no_scope(compiler):
    doc = compiler.compile_document(StackConfig(required_tags={"Owner": []}), mode="enforce")
    assert doc.to_dict() == {
        "tags": {
            "Owner": {
                "tag_key": {"@@assign": "Owner"},
                "enforced_for": {"@@assign": ["ec2:ALL_SUPPORTED", "s3:ALL_SUPPORTED"]},
            }
        }
    }


def test_custom_resource_names(config):
    compiler = TagPolicyCompiler(policy_name="org-tags", attachment_name="org-tags-root")
    plan = compiler.compile(config)
    assert plan.policy.name == "org-tags"
    assert plan.binding.name == "org-tags-root"
    assert plan.binding.policy_reference == "org-tags.id"


def test_plan_to_dict_shape(compiler, config):
    data = json.loads(compiler.compile(config).to_json())
    assert set(data) == {"policy", "attachment", "diagnostics"}
    assert data["policy"]["type"] == "TAG_POLICY"
    assert data["attachment"]["policy_reference"] == "required-tags-policy.id"
    assert data["diagnostics"]["mode"] == "report"
    assert len(data["diagnostics"]["content_hash"]) == 64
    assert json.loads(data["policy"]["content"])["tags"]["Owner"]["tag_key"] == {"@@assign": "Owner"}


def test_plan_summary(compiler, config):
    summary = compiler.compile(config).summary()
    assert summary["policy_name"] == "required-tags-policy"
    assert summary["target_scope"] == "r-root"
    assert summary["mode"] == "report"
    assert summary["supported_service_count"] == 2


def test_plan_rejects_foreign_binding(compiler, config):
    plan = compiler.compile(config)
    with pytest.raises(ConfigurationError, match="not part of this plan"):
        TagPolicyPlan(
            policy=plan.policy,
            binding=ScopeBindingRequest(policy_reference="other-policy.id", target_scope="r-root"),
            diagnostics=PlanDiagnostics(
                mode=EnforcementMode.REPORT,
                supported_service_count=2,
                content_hash="0" * 64,
            ),
        )
