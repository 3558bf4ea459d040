"""
Index definitions for the RBAC collections.

Every engine lookup is an equality match on indexed fields: the membership gate
on (orgId, userId), link tables on userId/groupId, and grants on the
(subjectType, subjectId, scopeType, scopeId) prefix of the unique grant index.

This module is part of MDB_RBAC.
"""

import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import OperationFailure, PyMongoError

from ..config import CollectionNames
from ..exceptions import RbacStorageError

logger = logging.getLogger(__name__)

RBAC_INDEXES: dict[str, list[dict[str, Any]]] = {
    "org_members": [
        {
            "name": "orgId_userId_unique",
            "keys": [("orgId", ASCENDING), ("userId", ASCENDING)],
            "unique": True,
        },
        {
            "name": "userId_status_createdAt",
            "keys": [("userId", ASCENDING), ("status", ASCENDING), ("createdAt", DESCENDING)],
        },
    ],
    "user_roles": [
        {
            "name": "userId_roleId_unique",
            "keys": [("userId", ASCENDING), ("roleId", ASCENDING)],
            "unique": True,
        },
    ],
    "groups": [
        {
            "name": "isGlobal_orgId_name",
            "keys": [("isGlobal", ASCENDING), ("orgId", ASCENDING), ("name", ASCENDING)],
        },
        {"name": "status", "keys": [("status", ASCENDING)]},
    ],
    "group_members": [
        {
            "name": "groupId_userId_unique",
            "keys": [("groupId", ASCENDING), ("userId", ASCENDING)],
            "unique": True,
        },
        {"name": "userId", "keys": [("userId", ASCENDING)]},
    ],
    "group_roles": [
        {
            "name": "groupId_roleId_unique",
            "keys": [("groupId", ASCENDING), ("roleId", ASCENDING)],
            "unique": True,
        },
    ],
    "grants": [
        {
            "name": "subject_scope_right_unique",
            "keys": [
                ("subjectType", ASCENDING),
                ("subjectId", ASCENDING),
                ("scopeType", ASCENDING),
                ("scopeId", ASCENDING),
                ("right", ASCENDING),
            ],
            "unique": True,
        },
    ],
}
"""Index definitions keyed by ``CollectionNames`` field."""


async def ensure_rbac_indexes(
    db: AsyncIOMotorDatabase,
    collections: CollectionNames | None = None,
) -> dict[str, list[str]]:
    """
    Create the lookup indexes used by the engine.

    Safe to run repeatedly; MongoDB treats identical index specs as a no-op.

    Args:
        db: Motor database holding the RBAC collections
        collections: Collection names (defaults to the standard names)

    Returns:
        Mapping of collection name to the index names ensured on it

    Raises:
        RbacStorageError: If an index cannot be created
    """
    collections = collections or CollectionNames()
    created: dict[str, list[str]] = {}

    for field_name, definitions in RBAC_INDEXES.items():
        collection_name = getattr(collections, field_name)
        collection = db[collection_name]
        for definition in definitions:
            options = {k: v for k, v in definition.items() if k != "keys"}
            try:
                index_name = await collection.create_index(definition["keys"], **options)
            except OperationFailure as e:
                logger.error(
                    f"Index '{definition['name']}' conflicts with an existing index "
                    f"on '{collection_name}': {e}"
                )
                raise RbacStorageError(
                    f"Failed to create index '{definition['name']}': {e}",
                    collection=collection_name,
                    operation="create_index",
                ) from e
            except PyMongoError as e:
                logger.exception(f"Failed to create index on '{collection_name}'")
                raise RbacStorageError(
                    f"Failed to create index '{definition['name']}': {e}",
                    collection=collection_name,
                    operation="create_index",
                ) from e
            created.setdefault(collection_name, []).append(index_name)

        logger.debug(f"Ensured {len(definitions)} index(es) on '{collection_name}'")

    logger.info(f"RBAC indexes ensured on {len(created)} collection(s)")
    return created
