"""``tagops`` command-line interface.

Compiles a stack configuration into JSON for the orchestration engine::

    tagops plan --config stack.yaml --mode report --target-scope r-abcd
    tagops document --config stack.yaml --mode enforce --compact

JSON goes to stdout (or ``--output``); logs go to stderr.  A configuration
error exits with status 2 and writes nothing.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from tagops.config import Settings, StackConfig, get_settings
from tagops.domain.value_objects.enforcement_mode import EnforcementMode
from tagops.engine.compiler.tag_policy_compiler import TagPolicyCompiler
from tagops.infrastructure.logging import setup_logging
from tagops.infrastructure.stack_config import load_stack_config
from tagops.shared.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="tagops",
        description="Compile organization tag policies for the orchestration engine.",
    )
    ap.add_argument("--log-level", default=None, help="debug, info, warning, error")
    ap.add_argument("--json-logs", action="store_true", default=None, help="emit JSON log lines")

    sub = ap.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="YAML stack configuration file")
    common.add_argument(
        "--mode",
        default=None,
        help=f"enforcement mode ({', '.join(m.value for m in EnforcementMode)})",
    )
    common.add_argument("--output", default=None, help="write JSON here instead of stdout")

    plan = sub.add_parser("plan", parents=[common], help="compile the policy and its attachment")
    plan.add_argument("--target-scope", default=None, help="organization root or unit id")

    document = sub.add_parser("document", parents=[common], help="compile the policy document only")
    document.add_argument("--compact", action="store_true", help="single-line JSON")

    return ap


def _load_config(path: str | None) -> StackConfig:
    if path is None:
        logger.info("stack_config_absent", note="using built-in default tags")
        return StackConfig()
    return load_stack_config(path)


def _write(text: str, output: str | None) -> None:
    if output is None:
        sys.stdout.write(text + "\n")
        return
    try:
        Path(output).write_text(text + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot write output {output}: {exc.strerror or exc}",
            context={"output": output},
        ) from exc
    logger.info("output_written", path=output)


def run(args: argparse.Namespace, settings: Settings) -> int:
    config = _load_config(args.config or settings.config_file)
    mode = args.mode if args.mode is not None else settings.enforcement_mode
    compiler = TagPolicyCompiler(
        policy_name=settings.policy_name,
        attachment_name=settings.attachment_name,
    )

    if args.command == "document":
        doc = compiler.compile_document(config, mode=mode)
        _write(doc.to_json(indent=None if args.compact else 2), args.output)
        return EXIT_OK

    target_scope = args.target_scope if args.target_scope is not None else settings.target_scope
    plan = compiler.compile(config, mode=mode, target_scope=target_scope)
    _write(plan.to_json(), args.output)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as exc:
        error = ConfigurationError(
            f"Invalid TAGOPS_ settings: {exc.error_count()} error(s)",
            context={
                "errors": [
                    {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
                    for err in exc.errors()
                ],
            },
        )
        setup_logging(level=args.log_level or "info", json_output=bool(args.json_logs))
        logger.error("tag_policy_rejected", **error.to_dict())
        return EXIT_CONFIG_ERROR

    setup_logging(
        level=args.log_level or settings.log_level,
        json_output=settings.log_json if args.json_logs is None else args.json_logs,
        log_file=settings.log_file,
    )

    try:
        return run(args, settings)
    except ConfigurationError as exc:
        logger.error("tag_policy_rejected", **exc.to_dict())
        return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    sys.exit(main())
