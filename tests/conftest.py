"""
Pytest configuration and shared fixtures for MDB_RBAC tests.

This module provides:
- An in-memory RBAC repository with seeding helpers and a lookup log
- Mock motor database fixtures for repository tests
- Common identifiers
"""

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId

from mdb_rbac.core.engine import RbacEngine
from mdb_rbac.core.types import Grant, Group, GroupRoleLink, ScopeType, SubjectType
from mdb_rbac.repositories.base import RbacRepository

# ============================================================================
# IN-MEMORY REPOSITORY
# ============================================================================


class InMemoryRbacRepository(RbacRepository):
    """RbacRepository over plain lists, recording every lookup in ``calls``."""

    def __init__(self) -> None:
        self.org_members: List[Dict[str, Any]] = []
        self.user_roles: List[Dict[str, Any]] = []
        self.groups: List[Dict[str, Any]] = []
        self.group_members: List[Dict[str, Any]] = []
        self.group_roles: List[Dict[str, Any]] = []
        self.grants: List[Dict[str, Any]] = []
        self.calls: List[tuple] = []

    # --- seeding -----------------------------------------------------------

    def add_member(self, user_id: ObjectId, org_id: ObjectId, status: str = "active") -> None:
        self.org_members.append(
            {"_id": ObjectId(), "userId": user_id, "orgId": org_id, "status": status}
        )

    def assign_role(self, user_id: ObjectId, role_id: ObjectId) -> None:
        self.user_roles.append({"_id": ObjectId(), "userId": user_id, "roleId": role_id})

    def add_group(
        self,
        is_global: bool = True,
        org_id: Optional[ObjectId] = None,
        status: str = "active",
    ) -> ObjectId:
        group_id = ObjectId()
        self.groups.append(
            {"_id": group_id, "isGlobal": is_global, "orgId": org_id, "status": status}
        )
        return group_id

    def add_to_group(self, user_id: ObjectId, group_id: ObjectId) -> None:
        self.group_members.append({"_id": ObjectId(), "userId": user_id, "groupId": group_id})

    def link_group_role(self, group_id: ObjectId, role_id: ObjectId) -> None:
        self.group_roles.append({"_id": ObjectId(), "groupId": group_id, "roleId": role_id})

    def add_grant(
        self,
        subject_type: str,
        subject_id: ObjectId,
        right: str,
        effect: str = "allow",
        scope_type: str = "global",
        scope_id: Optional[ObjectId] = None,
    ) -> ObjectId:
        grant_id = ObjectId()
        self.grants.append(
            {
                "_id": grant_id,
                "subjectType": subject_type,
                "subjectId": subject_id,
                "scopeType": scope_type,
                "scopeId": scope_id,
                "right": right,
                "effect": effect,
            }
        )
        return grant_id

    # --- RbacRepository ----------------------------------------------------

    async def find_active_membership(self, user_id, org_id):
        self.calls.append(("find_active_membership", user_id, org_id))
        for doc in self.org_members:
            if doc["userId"] == user_id and doc["orgId"] == org_id and doc["status"] == "active":
                return dict(doc)
        return None

    async def find_active_memberships_for_user(self, user_id):
        self.calls.append(("find_active_memberships_for_user", user_id))
        return [
            {"_id": d["_id"], "orgId": d["orgId"]}
            for d in self.org_members
            if d["userId"] == user_id and d["status"] == "active"
        ]

    async def find_user_role_ids(self, user_id):
        self.calls.append(("find_user_role_ids", user_id))
        return [d["roleId"] for d in self.user_roles if d["userId"] == user_id]

    async def find_user_group_ids(self, user_id):
        self.calls.append(("find_user_group_ids", user_id))
        return [d["groupId"] for d in self.group_members if d["userId"] == user_id]

    async def find_active_groups(self, group_ids):
        self.calls.append(("find_active_groups", list(group_ids)))
        return [
            Group.from_document(d)
            for d in self.groups
            if d["_id"] in group_ids and d["status"] == "active"
        ]

    async def find_group_role_links(self, group_ids):
        self.calls.append(("find_group_role_links", list(group_ids)))
        return [
            GroupRoleLink(group_id=d["groupId"], role_id=d["roleId"])
            for d in self.group_roles
            if d["groupId"] in group_ids
        ]

    async def find_grants(self, subject_type, subject_ids, scope_type, scope_id=None):
        subject_type = SubjectType(subject_type)
        scope_type = ScopeType(scope_type)
        self.calls.append(("find_grants", subject_type, scope_type))
        found = []
        for d in self.grants:
            if d["subjectType"] != subject_type.value or d["subjectId"] not in subject_ids:
                continue
            if d["scopeType"] != scope_type.value:
                continue
            if scope_type == ScopeType.ORG and (scope_id is None or d["scopeId"] != scope_id):
                continue
            found.append(Grant.from_document(dict(d)))
        return found

    def grant_lookups(self) -> List[tuple]:
        """(subject_type, scope_type) pairs queried so far."""
        return [(c[1], c[2]) for c in self.calls if c[0] == "find_grants"]


@pytest.fixture
def repository() -> InMemoryRbacRepository:
    """Empty in-memory RBAC repository."""
    return InMemoryRbacRepository()


@pytest.fixture
def engine(repository: InMemoryRbacRepository) -> RbacEngine:
    """RbacEngine over the in-memory repository."""
    return RbacEngine(repository)


@pytest.fixture
def user_id() -> ObjectId:
    return ObjectId()


@pytest.fixture
def org_id() -> ObjectId:
    return ObjectId()


@pytest.fixture
def member(repository: InMemoryRbacRepository, user_id: ObjectId, org_id: ObjectId):
    """Make ``user_id`` an active member of ``org_id``."""
    repository.add_member(user_id, org_id)
    return user_id, org_id


# ============================================================================
# MOCK MONGODB FIXTURES
# ============================================================================


def make_cursor(docs: Optional[List[Dict[str, Any]]] = None) -> MagicMock:
    """Mock motor cursor whose ``to_list`` resolves to ``docs``."""
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=list(docs or []))
    return cursor


class MockDatabase:
    """Mock motor database handing out one MagicMock collection per name."""

    def __init__(self) -> None:
        self.collections: Dict[str, MagicMock] = {}

    def __getitem__(self, name: str) -> MagicMock:
        if name not in self.collections:
            collection = MagicMock()
            collection.name = name
            collection.find = MagicMock(return_value=make_cursor())
            collection.find_one = AsyncMock(return_value=None)
            collection.create_index = AsyncMock(side_effect=lambda keys, **kw: kw.get("name"))
            self.collections[name] = collection
        return self.collections[name]


@pytest.fixture
def mock_mongo_database() -> MockDatabase:
    """Create a mock motor database."""
    return MockDatabase()
