from tagops.engine.compiler.document_compiler import (
    build_policy_resource,
    compile_policy_document,
)
from tagops.engine.compiler.tag_policy_compiler import (
    PlanDiagnostics,
    TagPolicyCompiler,
    TagPolicyPlan,
)

__all__ = [
    "PlanDiagnostics",
    "TagPolicyCompiler",
    "TagPolicyPlan",
    "build_policy_resource",
    "compile_policy_document",
]
