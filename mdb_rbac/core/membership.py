"""
Membership resolution.

Establishes whether a user is an active member of an organization and, if so,
which groups and roles apply to them there.

This module is part of MDB_RBAC.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from ..utils.ids import normalize_id
from .types import Membership

if TYPE_CHECKING:
    from bson import ObjectId

    from ..repositories.base import RbacRepository

logger = logging.getLogger(__name__)


async def resolve_membership(
    repository: RbacRepository, user_id: Any, org_id: Any
) -> Membership | None:
    """
    Resolve the roles and groups applying to a user inside an organization.

    Active organization membership is the single gate: when it is missing no
    role, group or grant lookups are made.

    Args:
        repository: RBAC repository
        user_id: User identifier (normalized here)
        org_id: Organization identifier (normalized here)

    Returns:
        Membership, or None for malformed ids and non-members

    Raises:
        RbacStorageError: If a storage lookup fails
    """
    uid = normalize_id(user_id)
    oid = normalize_id(org_id)
    if uid is None or oid is None:
        return None

    org_member = await repository.find_active_membership(uid, oid)
    if not org_member:
        return None

    direct_role_ids, group_ids = await asyncio.gather(
        repository.find_user_role_ids(uid),
        repository.find_user_group_ids(uid),
    )

    groups = await repository.find_active_groups(group_ids) if group_ids else []
    visible_groups = [g for g in groups if g.is_visible_in(oid)]

    visible_ids = [g.id for g in visible_groups]
    group_role_links = (
        await repository.find_group_role_links(visible_ids) if visible_ids else []
    )

    effective_role_ids = _dedupe(
        list(direct_role_ids) + [link.role_id for link in group_role_links]
    )

    logger.debug(
        f"Resolved membership for user={uid} org={oid}: "
        f"{len(visible_groups)}/{len(groups)} visible groups, "
        f"{len(effective_role_ids)} effective roles"
    )
    return Membership(
        org_member=org_member,
        visible_groups=visible_groups,
        direct_role_ids=list(direct_role_ids),
        group_role_links=group_role_links,
        effective_role_ids=effective_role_ids,
    )


def _dedupe(ids: list[ObjectId]) -> list[ObjectId]:
    seen: set[str] = set()
    unique = []
    for value in ids:
        key = str(value)
        if key in seen:
            continue
        seen.add(key)
        unique.append(value)
    return unique
