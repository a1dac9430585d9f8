"""YAML stack-file loader.

Reads the raw policy input from a YAML file.  Two layouts are accepted::

    # flat
    requiredTags:
      Environment: [Development, Staging, Production]
      Owner: []
    enforcementMode: report
    targetScope: r-abcd

    # stack file, keys optionally namespaced by project
    config:
      tag-policy:requiredTags:
        Environment: [Development, Staging, Production]
      tag-policy:enforcementMode: enforce

Only ``requiredTags``, ``enforcementMode``, ``targetScope`` and
``organizationRoots`` are read; provider keys in a ``config:`` block are
ignored.  Mixing the two layouts is an error.

Duplicate keys are rejected in every mapping; PyYAML would otherwise keep the
last occurrence and silently drop a duplicated tag definition.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from tagops.config import StackConfig
from tagops.shared.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

_STACK_CONFIG_KEY = "config"


def _stack_key_names() -> dict[str, str]:
    """Map every accepted spelling of a StackConfig key to its alias."""
    names: dict[str, str] = {}
    for field_name, field in StackConfig.model_fields.items():
        alias = field.alias or field_name
        names[field_name] = alias
        names[alias] = alias
    return names


_STACK_KEYS = _stack_key_names()


class _UniqueKeyLoader(yaml.SafeLoader):
    """Safe loader that refuses repeated mapping keys.

    Merge keys are flattened first, so a key pulled in with ``<<`` and set
    again locally counts as a repeat.
    """

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        self.flatten_mapping(node)
        seen: set[Any] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            try:
                duplicate = key in seen
            except TypeError:
                # Unhashable keys are reported by the base constructor.
                continue
            if duplicate:
                raise ConfigurationError(
                    f"Duplicate key {key!r} in stack configuration "
                    f"(line {key_node.start_mark.line + 1})",
                    context={"key": key, "line": key_node.start_mark.line + 1},
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _select_stack_keys(block: dict[Any, Any], *, namespaced: bool) -> dict[str, Any]:
    """Keep the keys StackConfig reads, keyed by alias; drop everything else."""
    selected: dict[str, Any] = {}
    for key, value in block.items():
        name = str(key)
        if namespaced:
            name = name.rsplit(":", 1)[-1]
        alias = _STACK_KEYS.get(name)
        if alias is None:
            continue
        if alias in selected:
            raise ConfigurationError(
                f"Stack configuration key {alias!r} is set more than once",
                context={"key": alias},
            )
        selected[alias] = value
    return selected


def parse_stack_config(text: str, *, source: str = "<string>") -> StackConfig:
    """Parse stack configuration from YAML *text*.

    An empty document yields an empty configuration, which compiles the
    built-in default tags.

    Raises:
        ConfigurationError: On YAML syntax errors, duplicate keys, a
            non-mapping root, mixed layouts or values of the wrong type.
    """
    try:
        data = yaml.load(text, Loader=_UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Cannot parse stack configuration {source}: {exc}",
            context={"source": source},
        ) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Stack configuration {source} must be a mapping, got {type(data).__name__}",
            context={"source": source},
        )

    flat = _select_stack_keys(data, namespaced=False)
    block = data.get(_STACK_CONFIG_KEY)
    if isinstance(block, dict):
        if flat:
            raise ConfigurationError(
                f"Stack configuration {source} sets {', '.join(sorted(flat))} "
                f"both at top level and next to a {_STACK_CONFIG_KEY!r} block",
                context={"source": source, "keys": sorted(flat)},
            )
        data = _select_stack_keys(block, namespaced=True)
    else:
        data = flat

    try:
        config = StackConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid stack configuration {source}: {exc.error_count()} error(s)",
            context={
                "source": source,
                "errors": [
                    {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
                    for err in exc.errors()
                ],
            },
        ) from exc

    logger.debug(
        "stack_config_parsed",
        source=source,
        has_required_tags=config.required_tags is not None,
        enforcement_mode=config.enforcement_mode,
    )
    return config


def load_stack_config(path: str | Path) -> StackConfig:
    """Load stack configuration from the YAML file at *path*."""
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read stack configuration {file_path}: {exc.strerror or exc}",
            context={"source": str(file_path)},
        ) from exc
    logger.info("stack_config_loaded", path=str(file_path))
    return parse_stack_config(text, source=str(file_path))
