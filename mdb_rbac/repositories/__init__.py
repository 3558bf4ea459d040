"""
MDB RBAC Repository Pattern

Read-only repository interface used by the decision engine and its MongoDB
implementation.

Usage:
    from mdb_rbac.repositories import MongoRbacRepository

    repo = MongoRbacRepository(db)
    engine = RbacEngine(repo)
"""

from .base import RbacRepository
from .mongo import MongoRbacRepository

__all__ = [
    "RbacRepository",
    "MongoRbacRepository",
]
