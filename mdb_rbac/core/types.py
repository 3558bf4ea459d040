"""
Type definitions for the RBAC decision engine.

Grants are read from a single polymorphic collection keyed by ``subjectType``.
In Python each grant carries a ``SubjectType`` tag and code that branches on
it handles every member explicitly.

This module is part of MDB_RBAC.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from bson import ObjectId

from ..utils.ids import id_to_str

logger = logging.getLogger(__name__)


# ============================================================================
# Enumerations
# ============================================================================


class SubjectType(str, Enum):
    """Who a grant is attached to. Also names the evaluation layer."""

    ORG = "org"
    GROUP = "group"
    ROLE = "role"
    USER = "user"


class ScopeType(str, Enum):
    """Where a grant applies."""

    GLOBAL = "global"
    ORG = "org"


class Effect(str, Enum):
    """Grant effect."""

    ALLOW = "allow"
    DENY = "deny"


class Reason(str, Enum):
    """Stable decision reason codes."""

    INVALID_RIGHT = "invalid_right"
    NOT_ORG_MEMBER = "not_org_member"
    DENIED = "denied"
    ALLOWED = "allowed"
    NO_MATCH = "no_match"


LAYER_PRIORITY: tuple[SubjectType, ...] = (
    SubjectType.ORG,
    SubjectType.GROUP,
    SubjectType.ROLE,
    SubjectType.USER,
)
"""Allow-scan order. The first layer with a matching allow is reported."""

DENY_DECISION_LAYER = "deny"
"""decision_layer reported when an explicit deny wins."""


# ============================================================================
# Stored records
# ============================================================================


def _parse_effect(value: Any, grant_id: Any) -> Effect:
    if value is None or value == "":
        return Effect.ALLOW
    try:
        return Effect(value)
    except ValueError:
        logger.warning(f"Grant {grant_id} has unknown effect {value!r}; treating it as deny")
        return Effect.DENY


@dataclass(frozen=True)
class Grant:
    """A single policy record: subject, scope, right pattern and effect."""

    id: ObjectId
    subject_type: SubjectType
    subject_id: ObjectId
    scope_type: ScopeType
    scope_id: ObjectId | None
    right: str
    effect: Effect = Effect.ALLOW

    @property
    def origin(self) -> str:
        """Origin tag used in explain traces, e.g. ``"role:org"``."""
        return f"{self.subject_type.value}:{self.scope_type.value}"

    @property
    def is_deny(self) -> bool:
        return self.effect is Effect.DENY

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Grant":
        """
        Build a grant from a stored ``rbac_grants`` document.

        Raises:
            ValueError: If subjectType or scopeType is not a known value
        """
        grant_id = doc.get("_id")
        return cls(
            id=grant_id,
            subject_type=SubjectType(doc.get("subjectType")),
            subject_id=doc.get("subjectId"),
            scope_type=ScopeType(doc.get("scopeType")),
            scope_id=doc.get("scopeId"),
            right=str(doc.get("right") or ""),
            effect=_parse_effect(doc.get("effect"), grant_id),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": id_to_str(self.id),
            "right": self.right,
            "effect": self.effect.value,
            "subject_type": self.subject_type.value,
            "subject_id": id_to_str(self.subject_id),
            "scope_type": self.scope_type.value,
            "scope_id": id_to_str(self.scope_id),
        }


@dataclass(frozen=True)
class Group:
    """An active group as seen by the engine."""

    id: ObjectId
    is_global: bool = True
    org_id: ObjectId | None = None

    def is_visible_in(self, org_id: ObjectId) -> bool:
        """Global groups are visible everywhere; others only in their own org."""
        if self.is_global:
            return True
        return self.org_id is not None and str(self.org_id) == str(org_id)

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Group":
        return cls(
            id=doc["_id"],
            is_global=bool(doc.get("isGlobal")),
            org_id=doc.get("orgId"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": id_to_str(self.id),
            "is_global": self.is_global,
            "org_id": id_to_str(self.org_id),
        }


@dataclass(frozen=True)
class GroupRoleLink:
    """A role conferred on every member of a group."""

    group_id: ObjectId
    role_id: ObjectId


# ============================================================================
# Resolution results
# ============================================================================


@dataclass(frozen=True)
class RoleOrigin:
    """How a user came to hold a role."""

    role_id: ObjectId
    source: str  # "user" or "group"
    group_id: ObjectId | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {"role_id": id_to_str(self.role_id), "source": self.source}
        if self.group_id is not None:
            data["group_id"] = id_to_str(self.group_id)
        return data


@dataclass
class AccessContext:
    """Roles and groups that applied to an evaluation."""

    roles: list[RoleOrigin] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "roles": [r.to_dict() for r in self.roles],
            "groups": [g.to_dict() for g in self.groups],
        }


@dataclass
class Membership:
    """Result of membership resolution for one (user, organization) pair."""

    org_member: dict[str, Any]
    visible_groups: list[Group] = field(default_factory=list)
    direct_role_ids: list[ObjectId] = field(default_factory=list)
    group_role_links: list[GroupRoleLink] = field(default_factory=list)
    effective_role_ids: list[ObjectId] = field(default_factory=list)

    @property
    def visible_group_ids(self) -> list[ObjectId]:
        return [g.id for g in self.visible_groups]

    def to_context(self) -> AccessContext:
        roles = [RoleOrigin(role_id=rid, source="user") for rid in self.direct_role_ids]
        roles.extend(
            RoleOrigin(role_id=link.role_id, source="group", group_id=link.group_id)
            for link in self.group_role_links
        )
        return AccessContext(roles=roles, groups=list(self.visible_groups))


@dataclass
class Layers:
    """Grants partitioned by subject type."""

    org: list[Grant] = field(default_factory=list)
    group: list[Grant] = field(default_factory=list)
    role: list[Grant] = field(default_factory=list)
    user: list[Grant] = field(default_factory=list)

    def for_subject(self, subject_type: SubjectType) -> list[Grant]:
        """Return the layer holding grants of the given subject type."""
        if subject_type == SubjectType.ORG:
            return self.org
        if subject_type == SubjectType.GROUP:
            return self.group
        if subject_type == SubjectType.ROLE:
            return self.role
        if subject_type == SubjectType.USER:
            return self.user
        raise ValueError(f"Unknown subject type: {subject_type!r}")

    def all_grants(self) -> list[Grant]:
        """All grants, in layer priority order."""
        grants: list[Grant] = []
        for subject_type in LAYER_PRIORITY:
            grants.extend(self.for_subject(subject_type))
        return grants

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            subject_type.value: [g.to_dict() for g in self.for_subject(subject_type)]
            for subject_type in LAYER_PRIORITY
        }


@dataclass(frozen=True)
class Verdict:
    """Outcome of policy evaluation, before explain filtering."""

    allowed: bool
    reason: Reason
    decision_layer: str | None = None
    matched: tuple[Grant, ...] = ()

    @property
    def matched_ids(self) -> set[str]:
        return {str(g.id) for g in self.matched}


# ============================================================================
# Outputs
# ============================================================================


@dataclass(frozen=True)
class ExplainEntry:
    """One grant in an explain trace, tagged with its origin."""

    source: str
    effect: str
    right: str
    subject_type: str
    subject_id: str | None
    scope_type: str
    scope_id: str | None
    id: str | None

    @classmethod
    def from_grant(cls, grant: Grant) -> "ExplainEntry":
        return cls(
            source=grant.origin,
            effect=grant.effect.value,
            right=grant.right,
            subject_type=grant.subject_type.value,
            subject_id=id_to_str(grant.subject_id),
            scope_type=grant.scope_type.value,
            scope_id=id_to_str(grant.scope_id),
            id=id_to_str(grant.id),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "effect": self.effect,
            "right": self.right,
            "subject_type": self.subject_type,
            "subject_id": self.subject_id,
            "scope_type": self.scope_type,
            "scope_id": self.scope_id,
            "id": self.id,
        }


@dataclass
class AccessDecision:
    """Result of ``RbacEngine.check_right``."""

    allowed: bool
    reason: Reason
    decision_layer: str | None = None
    explain: list[ExplainEntry] = field(default_factory=list)
    context: AccessContext | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "allowed": self.allowed,
            "reason": self.reason.value,
            "decision_layer": self.decision_layer,
            "explain": [e.to_dict() for e in self.explain],
            "context": self.context.to_dict() if self.context is not None else None,
        }


@dataclass
class EffectiveGrants:
    """Result of ``RbacEngine.get_effective_grants``."""

    grants: list[Grant] = field(default_factory=list)
    layers: Layers = field(default_factory=Layers)
    explain: list[ExplainEntry] = field(default_factory=list)
    context: AccessContext = field(default_factory=AccessContext)
    org_member: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "grants": [g.to_dict() for g in self.grants],
            "layers": self.layers.to_dict(),
            "explain": [e.to_dict() for e in self.explain],
            "context": self.context.to_dict(),
            "is_member": self.org_member is not None,
        }
