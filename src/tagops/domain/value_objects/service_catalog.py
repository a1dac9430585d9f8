"""Resource service catalog -- the governable service classes.

The catalog is static and versioned with the compiler.  Every service is
referenced with the ``ALL_SUPPORTED`` resource-type wildcard so the policy
covers every taggable resource type of that service.

Reference: https://docs.aws.amazon.com/organizations/latest/userguide/orgs_manage_policies_supported-resources-enforcement.html
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

import structlog

from tagops.shared.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

ALL_SUPPORTED_SUFFIX: str = ":ALL_SUPPORTED"

_SERVICE_ID_RE = re.compile(r"^[a-z0-9][a-z0-9-]*$")

SUPPORTED_SERVICES: tuple[str, ...] = (
    "access-analyzer",
    "apigateway",
    "appmesh",
    "appstream",
    "athena",
    "cloudformation",
    "cloudfront",
    "cloudtrail",
    "cloudwatch",
    "codebuild",
    "codecommit",
    "codepipeline",
    "config",
    "dynamodb",
    "ec2",
    "ecr",
    "ecs",
    "elasticfilesystem",
    "eks",
    "elasticbeanstalk",
    "elasticache",
    "elasticloadbalancing",
    "es",
    "events",
    "fsx",
    "glue",
    "iam",
    "kinesis",
    "kms",
    "lambda",
    "logs",
    "rds",
    "redshift",
    "route53",
    "s3",
    "sagemaker",
    "secretsmanager",
    "sns",
    "sqs",
    "states",
    "ssm",
    "waf",
    "wafv2",
    "workspaces",
)


@dataclass(frozen=True, slots=True)
class ResourceServiceCatalog:
    """Ordered, duplicate-free set of service identifiers.

    Attributes:
        services: Service identifiers in emission order.
    """

    services: tuple[str, ...]

    def __post_init__(self) -> None:
        services = tuple(self.services)
        object.__setattr__(self, "services", services)
        seen: set[str] = set()
        for service in services:
            if not isinstance(service, str) or not _SERVICE_ID_RE.match(service):
                raise ConfigurationError(
                    f"Invalid service identifier {service!r}: "
                    f"must match {_SERVICE_ID_RE.pattern}",
                    context={"service": service},
                )
            if service in seen:
                raise ConfigurationError(
                    f"Duplicate service identifier {service!r} in catalog",
                    context={"service": service},
                )
            seen.add(service)

    def __len__(self) -> int:
        return len(self.services)

    def __iter__(self) -> Iterator[str]:
        return iter(self.services)

    def tokens(self) -> list[str]:
        """Return ``"<service>:ALL_SUPPORTED"`` for every service, in order."""
        return [f"{service}{ALL_SUPPORTED_SUFFIX}" for service in self.services]


DEFAULT_CATALOG = ResourceServiceCatalog(SUPPORTED_SERVICES)
