"""
MongoDB RBAC Repository

Implements RbacRepository over a motor database. Collection names come from
``CollectionNames`` so deployments with renamed collections can reuse it.
"""

import logging
from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from ..config import CollectionNames
from ..constants import GROUP_STATUS_ACTIVE, MEMBERSHIP_STATUS_ACTIVE
from ..core.types import Grant, Group, GroupRoleLink, ScopeType, SubjectType
from ..exceptions import RbacStorageError
from .base import RbacRepository

logger = logging.getLogger(__name__)


class MongoRbacRepository(RbacRepository):
    """
    MongoDB implementation of the RBAC repository.

    Example:
        repo = MongoRbacRepository(client["app"])
        membership = await repo.find_active_membership(user_id, org_id)
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        collections: CollectionNames | None = None,
    ):
        """
        Initialize the repository.

        Args:
            db: Motor database holding the RBAC collections
            collections: Collection names (defaults to the standard names)
        """
        self._db = db
        self._collections = collections or CollectionNames()

    @property
    def collections(self) -> CollectionNames:
        return self._collections

    async def _find(
        self,
        collection_name: str,
        operation: str,
        filter: dict[str, Any],
        projection: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        try:
            cursor = self._db[collection_name].find(filter, projection)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.exception(f"RBAC lookup '{operation}' failed on '{collection_name}'")
            raise RbacStorageError(
                f"Failed to read RBAC data: {e}",
                collection=collection_name,
                operation=operation,
            ) from e

    async def find_active_membership(
        self, user_id: ObjectId, org_id: ObjectId
    ) -> dict[str, Any] | None:
        name = self._collections.org_members
        try:
            return await self._db[name].find_one(
                {"userId": user_id, "orgId": org_id, "status": MEMBERSHIP_STATUS_ACTIVE}
            )
        except PyMongoError as e:
            logger.exception(f"RBAC lookup 'find_active_membership' failed on '{name}'")
            raise RbacStorageError(
                f"Failed to read RBAC data: {e}",
                collection=name,
                operation="find_active_membership",
            ) from e

    async def find_active_memberships_for_user(self, user_id: ObjectId) -> list[dict[str, Any]]:
        return await self._find(
            self._collections.org_members,
            "find_active_memberships_for_user",
            {"userId": user_id, "status": MEMBERSHIP_STATUS_ACTIVE},
            {"orgId": 1},
        )

    async def find_user_role_ids(self, user_id: ObjectId) -> list[ObjectId]:
        docs = await self._find(
            self._collections.user_roles,
            "find_user_role_ids",
            {"userId": user_id},
            {"roleId": 1},
        )
        return [d["roleId"] for d in docs if d.get("roleId")]

    async def find_user_group_ids(self, user_id: ObjectId) -> list[ObjectId]:
        docs = await self._find(
            self._collections.group_members,
            "find_user_group_ids",
            {"userId": user_id},
            {"groupId": 1},
        )
        return [d["groupId"] for d in docs if d.get("groupId")]

    async def find_active_groups(self, group_ids: list[ObjectId]) -> list[Group]:
        if not group_ids:
            return []
        docs = await self._find(
            self._collections.groups,
            "find_active_groups",
            {"_id": {"$in": list(group_ids)}, "status": GROUP_STATUS_ACTIVE},
            {"_id": 1, "isGlobal": 1, "orgId": 1},
        )
        return [Group.from_document(d) for d in docs]

    async def find_group_role_links(self, group_ids: list[ObjectId]) -> list[GroupRoleLink]:
        if not group_ids:
            return []
        docs = await self._find(
            self._collections.group_roles,
            "find_group_role_links",
            {"groupId": {"$in": list(group_ids)}},
            {"groupId": 1, "roleId": 1},
        )
        return [
            GroupRoleLink(group_id=d["groupId"], role_id=d["roleId"])
            for d in docs
            if d.get("groupId") and d.get("roleId")
        ]

    async def find_grants(
        self,
        subject_type: SubjectType,
        subject_ids: list[ObjectId],
        scope_type: ScopeType,
        scope_id: ObjectId | None = None,
    ) -> list[Grant]:
        if not subject_ids:
            return []
        subject_type = SubjectType(subject_type)
        scope_type = ScopeType(scope_type)

        query: dict[str, Any] = {"subjectType": subject_type.value, "scopeType": scope_type.value}
        if len(subject_ids) == 1:
            query["subjectId"] = subject_ids[0]
        else:
            query["subjectId"] = {"$in": list(subject_ids)}
        if scope_type == ScopeType.ORG:
            if scope_id is None:
                return []
            query["scopeId"] = scope_id

        docs = await self._find(
            self._collections.grants,
            f"find_grants[{subject_type.value}:{scope_type.value}]",
            query,
        )
        return [Grant.from_document(d) for d in docs]
