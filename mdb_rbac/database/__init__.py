"""
Database layer for MDB_RBAC.

Connection lifecycle and index setup for the RBAC collections.
"""

from .connection import ConnectionManager
from .indexes import RBAC_INDEXES, ensure_rbac_indexes

__all__ = [
    "ConnectionManager",
    "RBAC_INDEXES",
    "ensure_rbac_indexes",
]
