"""
Grant aggregation.

Collects the grants that apply to a resolved membership and partitions them
into the org, group, role and user layers.

This module is part of MDB_RBAC.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from ..utils.ids import normalize_id
from .types import LAYER_PRIORITY, Grant, Layers, Membership, ScopeType, SubjectType

if TYPE_CHECKING:
    from bson import ObjectId

    from ..repositories.base import RbacRepository

logger = logging.getLogger(__name__)

SCOPES: tuple[ScopeType, ...] = (ScopeType.GLOBAL, ScopeType.ORG)


def subject_ids_for(
    subject_type: SubjectType,
    user_id: ObjectId,
    org_id: ObjectId,
    membership: Membership,
) -> list[ObjectId]:
    """
    Subjects whose grants apply for a given subject type.

    Raises:
        ValueError: For an unknown subject type
    """
    if subject_type == SubjectType.ORG:
        return [org_id]
    if subject_type == SubjectType.GROUP:
        return membership.visible_group_ids
    if subject_type == SubjectType.ROLE:
        return list(membership.effective_role_ids)
    if subject_type == SubjectType.USER:
        return [user_id]
    raise ValueError(f"Unknown subject type: {subject_type!r}")


async def aggregate_grants(
    repository: RbacRepository,
    user_id: Any,
    org_id: Any,
    membership: Membership,
) -> Layers:
    """
    Fetch and layer every grant applicable to a member.

    Up to eight lookups are issued concurrently, one per (subject type, scope)
    pair. Pairs without subjects (e.g. no visible groups) are skipped.
    Global and org-scoped grants of the same subject type share a layer.

    Args:
        repository: RBAC repository
        user_id: User identifier
        org_id: Organization identifier
        membership: Result of ``resolve_membership`` for the same pair

    Returns:
        Layers

    Raises:
        RbacStorageError: If a storage lookup fails
    """
    uid = normalize_id(user_id)
    oid = normalize_id(org_id)
    if uid is None or oid is None:
        return Layers()

    keys: list[tuple[SubjectType, ScopeType]] = []
    lookups = []
    for subject_type in LAYER_PRIORITY:
        subject_ids = subject_ids_for(subject_type, uid, oid, membership)
        if not subject_ids:
            continue
        for scope_type in SCOPES:
            scope_id = oid if scope_type == ScopeType.ORG else None
            keys.append((subject_type, scope_type))
            lookups.append(repository.find_grants(subject_type, subject_ids, scope_type, scope_id))

    results = await asyncio.gather(*lookups)

    layers = Layers()
    seen: set[str] = set()
    for (subject_type, _scope_type), grants in zip(keys, results):
        layer = layers.for_subject(subject_type)
        for grant in grants:
            _add_grant(layer, grant, seen)

    logger.debug(
        f"Aggregated grants for user={uid} org={oid} with {len(lookups)} lookups: "
        + ", ".join(f"{st.value}={len(layers.for_subject(st))}" for st in LAYER_PRIORITY)
    )
    return layers


def _add_grant(layer: list[Grant], grant: Grant, seen: set[str]) -> None:
    key = str(grant.id)
    if key in seen:
        return
    seen.add(key)
    layer.append(grant)
