"""
Utility functions for MDB_RBAC.
"""

from .ids import id_to_str, normalize_id, normalize_right

__all__ = [
    "normalize_id",
    "normalize_right",
    "id_to_str",
]
