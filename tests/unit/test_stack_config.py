"""Test YAML stack configuration loading."""

import textwrap

import pytest

from tagops.config import StackConfig
from tagops.infrastructure.stack_config import load_stack_config, parse_stack_config
from tagops.shared.exceptions import ConfigurationError


def _yaml(text: str) -> str:
    return textwrap.dedent(text).lstrip()


def test_parse_flat_layout():
    cfg = parse_stack_config(_yaml("""
        requiredTags:
          Environment: [Dev, Prod]
          Owner: []
        enforcementMode: enforce
        targetScope: r-abcd
        organizationRoots: [r-abcd]
    """))
    assert cfg.required_tags == {"Environment": ["Dev", "Prod"], "Owner": []}
    assert list(cfg.required_tags) == ["Environment", "Owner"]
    assert cfg.enforcement_mode == "enforce"
    assert cfg.target_scope == "r-abcd"
    assert cfg.organization_roots == ["r-abcd"]


def test_parse_namespaced_stack_layout():
    cfg = parse_stack_config(_yaml("""
        config:
          aws:region: us-east-1
          tag-policy:requiredTags:
            CostCenter: []
          tag-policy:enforcementMode: report
    """))
    assert cfg.required_tags == {"CostCenter": []}
    assert cfg.enforcement_mode == "report"
    assert cfg.target_scope is None


def test_parse_empty_document():
    assert parse_stack_config("") == StackConfig()


def test_parse_leaves_mode_absent():
    cfg = parse_stack_config("requiredTags: {Owner: []}\n")
    assert cfg.enforcement_mode is None


def test_duplicate_tag_name_rejected():
    with pytest.raises(ConfigurationError, match="Duplicate key 'Owner'") as exc_info:
        parse_stack_config(_yaml("""
            requiredTags:
              Owner: []
              Project: []
              Owner: [alice]
        """))
    assert exc_info.value.context["line"] == 4


def test_duplicate_namespaced_key_rejected():
    with pytest.raises(ConfigurationError, match="more than once"):
        parse_stack_config(_yaml("""
            config:
              a:enforcementMode: report
              b:enforcementMode: enforce
        """))


def test_invalid_yaml_rejected():
    with pytest.raises(ConfigurationError, match="Cannot parse"):
        parse_stack_config("requiredTags: [unclosed\n")


def test_non_mapping_root_rejected():
    with pytest.raises(ConfigurationError, match="must be a mapping"):
        parse_stack_config("- a\n- b\n")


def test_wrong_types_rejected():
    with pytest.raises(ConfigurationError, match="Invalid stack configuration") as exc_info:
        parse_stack_config("enforcementMode: [report]\n")
    assert exc_info.value.context["errors"][0]["loc"] == "enforcementMode"


def test_load_from_file(tmp_path):
    path = tmp_path / "Pulumi.dev.yaml"
    path.write_text("requiredTags:\n  Team: [core, edge]\n", encoding="utf-8")
    cfg = load_stack_config(path)
    assert cfg.required_tags == {"Team": ["core", "edge"]}


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Cannot read") as exc_info:
        load_stack_config(tmp_path / "missing.yaml")
    assert exc_info.value.context["source"].endswith("missing.yaml")


def test_provider_keys_in_stack_block_are_ignored():
    cfg = parse_stack_config(_yaml("""
        config:
          aws:region: us-east-1
          aws-native:region: us-east-1
          tp:requiredTags:
            Owner: []
    """))
    assert cfg.required_tags == {"Owner": []}


def test_field_name_and_alias_together_rejected():
    with pytest.raises(ConfigurationError, match="'requiredTags' is set more than once"):
        parse_stack_config(_yaml("""
            requiredTags: {Owner: []}
            required_tags: {Team: []}
        """))


def test_flat_keys_next_to_config_block_rejected():
    with pytest.raises(ConfigurationError, match="both at top level") as exc_info:
        parse_stack_config(_yaml("""
            requiredTags:
              Team: [core]
            organizationRoots: [r-1]
            config:
              note: x
        """))
    assert exc_info.value.context["keys"] == ["organizationRoots", "requiredTags"]


def test_unrelated_top_level_keys_next_to_config_block():
    cfg = parse_stack_config(_yaml("""
        encryptionsalt: v1:abc
        config:
          tp:requiredTags:
            Team: [core]
    """))
    assert cfg.required_tags == {"Team": ["core"]}


def test_merged_label_repeated_locally_rejected():
    with pytest.raises(ConfigurationError, match="Duplicate key 'Owner'") as exc_info:
        parse_stack_config(_yaml("""
            base: &b {Owner: [alice]}
            requiredTags:
              <<: *b
              Owner: [bob]
        """))
    assert exc_info.value.context["line"] == 4


def test_merge_without_overlap_is_accepted():
    cfg = parse_stack_config(_yaml("""
        base: &b {Owner: [alice]}
        requiredTags:
          <<: *b
          Project: []
    """))
    assert cfg.required_tags == {"Owner": ["alice"], "Project": []}
