from tagops.domain.value_objects.enforcement_mode import (
    DEFAULT_MODE,
    ENFORCE_FIELD,
    REPORT_FIELD,
    EnforcementMode,
    ModeResolution,
    resolve_enforcement_mode,
)
from tagops.domain.value_objects.service_catalog import (
    DEFAULT_CATALOG,
    SUPPORTED_SERVICES,
    ResourceServiceCatalog,
)

__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_MODE",
    "ENFORCE_FIELD",
    "REPORT_FIELD",
    "SUPPORTED_SERVICES",
    "EnforcementMode",
    "ModeResolution",
    "ResourceServiceCatalog",
    "resolve_enforcement_mode",
]
