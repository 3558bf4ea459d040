"""
FastAPI integration for the RBAC engine.
"""

from .dependencies import default_org_id, get_rbac_engine, require_right

__all__ = [
    "get_rbac_engine",
    "require_right",
    "default_org_id",
]
