"""
Abstract RBAC Repository

Defines the read-only data access contract the decision engine depends on.
The engine is handed a repository explicitly; it never reaches for a global
database handle. Any implementation (MongoDB, in-memory for tests, ...) can
stand behind it.
"""

from abc import ABC, abstractmethod
from typing import Any

from bson import ObjectId

from ..core.types import Grant, Group, GroupRoleLink, ScopeType, SubjectType


class RbacRepository(ABC):
    """
    Read-only lookups over memberships, groups, role links and grants.

    Implementations must raise ``RbacStorageError`` for storage faults and
    must never return partial results in place of an error.
    """

    @abstractmethod
    async def find_active_membership(
        self, user_id: ObjectId, org_id: ObjectId
    ) -> dict[str, Any] | None:
        """
        Find the active organization membership for a user.

        Args:
            user_id: User ID
            org_id: Organization ID

        Returns:
            Membership document, or None if the user is not an active member
        """

    @abstractmethod
    async def find_active_memberships_for_user(self, user_id: ObjectId) -> list[dict[str, Any]]:
        """
        Find every active organization membership of a user.

        Args:
            user_id: User ID

        Returns:
            Membership documents (each carrying ``orgId``)
        """

    @abstractmethod
    async def find_user_role_ids(self, user_id: ObjectId) -> list[ObjectId]:
        """Role IDs assigned directly to a user."""

    @abstractmethod
    async def find_user_group_ids(self, user_id: ObjectId) -> list[ObjectId]:
        """IDs of every group the user belongs to, regardless of status."""

    @abstractmethod
    async def find_active_groups(self, group_ids: list[ObjectId]) -> list[Group]:
        """
        Resolve group IDs to active groups.

        Args:
            group_ids: Candidate group IDs

        Returns:
            Active groups among the given IDs (disabled groups are omitted)
        """

    @abstractmethod
    async def find_group_role_links(self, group_ids: list[ObjectId]) -> list[GroupRoleLink]:
        """Role links attached to any of the given groups."""

    @abstractmethod
    async def find_grants(
        self,
        subject_type: SubjectType,
        subject_ids: list[ObjectId],
        scope_type: ScopeType,
        scope_id: ObjectId | None = None,
    ) -> list[Grant]:
        """
        Find grants for a set of subjects in one scope.

        Args:
            subject_type: Subject type of the grants
            subject_ids: Subjects the grants must be attached to
            scope_type: ``global`` or ``org``
            scope_id: Target organization; required when scope_type is ``org``

        Returns:
            Matching grants
        """
