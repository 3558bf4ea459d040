"""
RBAC decision engine.

Entry point combining membership resolution, grant aggregation, policy
evaluation and explain traces:

    engine = RbacEngine(MongoRbacRepository(db))
    decision = await engine.check_right(user_id, org_id, "posts:write")
    if not decision.allowed:
        ...  # respond 403; use decision.reason / decision.explain for diagnostics

The engine is stateless and read-only. It keeps no cache, so every call sees
the grants as currently stored.

This module is part of MDB_RBAC.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from ..observability import get_logger as get_contextual_logger
from ..observability import log_operation
from ..rights.matcher import RightMatcher, matches
from ..utils.ids import normalize_id, normalize_right
from .aggregation import aggregate_grants
from .evaluation import evaluate
from .explain import build_explain, filter_explain
from .membership import resolve_membership
from .types import AccessDecision, EffectiveGrants, Layers, Reason

if TYPE_CHECKING:
    from ..repositories.base import RbacRepository

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)


class RbacEngine:
    """
    Decides whether a user holds a right inside an organization.

    Dependencies are passed in explicitly; nothing is read from process-wide
    state.
    """

    def __init__(self, repository: RbacRepository, matcher: RightMatcher = matches) -> None:
        """
        Initialize the engine.

        Args:
            repository: Read-only RBAC repository
            matcher: Right matcher, ``matcher(required, granted) -> bool``
        """
        self._repository = repository
        self._matcher = matcher

    @property
    def repository(self) -> RbacRepository:
        return self._repository

    async def check_right(self, user_id: Any, org_id: Any, right: Any) -> AccessDecision:
        """
        Check a right for a user in an organization.

        Args:
            user_id: User identifier (ObjectId or hex string)
            org_id: Organization identifier (ObjectId or hex string)
            right: Requested right

        Returns:
            AccessDecision. ``reason`` is one of invalid_right, not_org_member,
            denied, allowed, no_match.

        Raises:
            RbacStorageError: If storage fails; never turned into a decision
        """
        required = normalize_right(right)
        if not required:
            return AccessDecision(allowed=False, reason=Reason.INVALID_RIGHT)

        start_time = time.time()
        effective = await self.get_effective_grants(user_id, org_id)
        if effective.org_member is None:
            decision = AccessDecision(allowed=False, reason=Reason.NOT_ORG_MEMBER)
        else:
            verdict = evaluate(effective.layers, required, self._matcher)
            decision = AccessDecision(
                allowed=verdict.allowed,
                reason=verdict.reason,
                decision_layer=verdict.decision_layer,
                explain=filter_explain(effective.explain, verdict),
                context=effective.context,
            )

        log_operation(
            contextual_logger,
            "rbac.check_right",
            level=logging.DEBUG,
            duration_ms=(time.time() - start_time) * 1000,
            right=required,
            allowed=decision.allowed,
            reason=decision.reason.value,
            decision_layer=decision.decision_layer,
        )
        return decision

    async def get_effective_grants(self, user_id: Any, org_id: Any) -> EffectiveGrants:
        """
        Collect everything a member may be granted or denied in an organization.

        Used by administration tooling to show "what can this user do" without
        a specific right in mind.

        Returns:
            EffectiveGrants; for malformed ids and non-members the result is
            empty and ``org_member`` is None.

        Raises:
            RbacStorageError: If storage fails
        """
        membership = await resolve_membership(self._repository, user_id, org_id)
        if membership is None:
            logger.debug(f"No active membership for user={user_id} org={org_id}")
            return EffectiveGrants()

        layers: Layers = await aggregate_grants(self._repository, user_id, org_id, membership)
        return EffectiveGrants(
            grants=layers.all_grants(),
            layers=layers,
            explain=build_explain(layers),
            context=membership.to_context(),
            org_member=membership.org_member,
        )

    async def get_user_org_ids(self, user_id: Any) -> list[str]:
        """
        Organization IDs where the user holds an active membership.

        Returns:
            List of organization ID strings (empty for malformed ids)
        """
        uid = normalize_id(user_id)
        if uid is None:
            return []
        rows = await self._repository.find_active_memberships_for_user(uid)
        return [str(row["orgId"]) for row in rows if row.get("orgId") is not None]
