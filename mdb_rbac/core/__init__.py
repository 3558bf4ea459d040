"""
Core RBAC decision engine.

Membership resolution, grant aggregation, policy evaluation and explain
traces, plus the ``RbacEngine`` facade that ties them together.
"""

from .aggregation import aggregate_grants
from .engine import RbacEngine
from .evaluation import evaluate
from .explain import build_explain, filter_explain
from .membership import resolve_membership
from .types import (
    LAYER_PRIORITY,
    AccessContext,
    AccessDecision,
    Effect,
    EffectiveGrants,
    ExplainEntry,
    Grant,
    Group,
    GroupRoleLink,
    Layers,
    Membership,
    Reason,
    RoleOrigin,
    ScopeType,
    SubjectType,
    Verdict,
)

__all__ = [
    "RbacEngine",
    "resolve_membership",
    "aggregate_grants",
    "evaluate",
    "build_explain",
    "filter_explain",
    "LAYER_PRIORITY",
    "AccessContext",
    "AccessDecision",
    "Effect",
    "EffectiveGrants",
    "ExplainEntry",
    "Grant",
    "Group",
    "GroupRoleLink",
    "Layers",
    "Membership",
    "Reason",
    "RoleOrigin",
    "ScopeType",
    "SubjectType",
    "Verdict",
]
