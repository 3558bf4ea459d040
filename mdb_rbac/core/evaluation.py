"""
Policy evaluation.

Two phases over the aggregated layers:

1. Deny scan: any matching deny in any layer denies, whatever the allows say.
2. Allow scan: layers are examined in ``LAYER_PRIORITY`` order and the first
   one holding a matching allow is reported as the decision layer.

Nothing matching in either phase is ``no_match``, which callers treat as a
deny. Evaluation never touches storage.

This module is part of MDB_RBAC.
"""

from ..rights.matcher import RightMatcher, matches
from ..utils.ids import normalize_right
from .types import (
    DENY_DECISION_LAYER,
    LAYER_PRIORITY,
    Effect,
    Grant,
    Layers,
    Reason,
    Verdict,
)


def matching_grants(
    grants: list[Grant],
    required_right: str,
    effect: Effect,
    matcher: RightMatcher = matches,
) -> list[Grant]:
    """Grants with the given effect whose right pattern covers the requirement."""
    return [
        g
        for g in grants
        if g is not None and g.effect == effect and matcher(required_right, g.right)
    ]


def evaluate(
    layers: Layers,
    required_right: str,
    matcher: RightMatcher = matches,
) -> Verdict:
    """
    Decide ALLOW or DENY for a right over aggregated layers.

    Args:
        layers: Aggregated grants
        required_right: Requested right
        matcher: Right matcher (``matcher(required, granted) -> bool``)

    Returns:
        Verdict with the grants that decided it
    """
    right = normalize_right(required_right)
    if not right:
        return Verdict(allowed=False, reason=Reason.INVALID_RIGHT)

    denies = matching_grants(layers.all_grants(), right, Effect.DENY, matcher)
    if denies:
        return Verdict(
            allowed=False,
            reason=Reason.DENIED,
            decision_layer=DENY_DECISION_LAYER,
            matched=tuple(denies),
        )

    for subject_type in LAYER_PRIORITY:
        allows = matching_grants(layers.for_subject(subject_type), right, Effect.ALLOW, matcher)
        if allows:
            return Verdict(
                allowed=True,
                reason=Reason.ALLOWED,
                decision_layer=subject_type.value,
                matched=tuple(allows),
            )

    return Verdict(allowed=False, reason=Reason.NO_MATCH)
