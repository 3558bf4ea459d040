"""
Explain traces.

The full trace is built once from the aggregated layers and then narrowed to
the grants that decided a verdict, so non-matching grants never show up as
false leads.

This module is part of MDB_RBAC.
"""

from .types import ExplainEntry, Grant, Layers, ScopeType, SubjectType, Verdict

EXPLAIN_ORDER: tuple[tuple[SubjectType, ScopeType], ...] = (
    (SubjectType.USER, ScopeType.GLOBAL),
    (SubjectType.USER, ScopeType.ORG),
    (SubjectType.ROLE, ScopeType.GLOBAL),
    (SubjectType.ROLE, ScopeType.ORG),
    (SubjectType.GROUP, ScopeType.GLOBAL),
    (SubjectType.GROUP, ScopeType.ORG),
    (SubjectType.ORG, ScopeType.GLOBAL),
    (SubjectType.ORG, ScopeType.ORG),
)
"""Order of origins in a trace: most specific subject first."""


def _grants_for_origin(
    layers: Layers, subject_type: SubjectType, scope_type: ScopeType
) -> list[Grant]:
    return [g for g in layers.for_subject(subject_type) if g.scope_type == scope_type]


def build_explain(layers: Layers, verdict: Verdict | None = None) -> list[ExplainEntry]:
    """
    Build an explain trace.

    Args:
        layers: Aggregated grants
        verdict: When given, keep only the grants that decided it

    Returns:
        Explain entries, tagged with their origin (e.g. ``"group:global"``)
    """
    trace = [
        ExplainEntry.from_grant(grant)
        for subject_type, scope_type in EXPLAIN_ORDER
        for grant in _grants_for_origin(layers, subject_type, scope_type)
    ]
    if verdict is None:
        return trace
    return filter_explain(trace, verdict)


def filter_explain(trace: list[ExplainEntry], verdict: Verdict) -> list[ExplainEntry]:
    """Keep only entries for grants that participated in the verdict."""
    matched_ids = verdict.matched_ids
    if not matched_ids:
        return []
    return [entry for entry in trace if entry.id in matched_ids]
