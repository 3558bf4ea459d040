"""
MDB_RBAC - RBAC decision engine for MongoDB

Decides whether a user holds a right inside an organization by combining
organization, group, role and user grants, with explicit denies overriding
every allow and an explain trace for each decision.
"""

# Core engine (must load before repositories)
from .core import (
    AccessDecision,
    EffectiveGrants,
    ExplainEntry,
    Grant,
    Layers,
    RbacEngine,
    Reason,
    ScopeType,
    SubjectType,
)
# Configuration and errors
from .config import CollectionNames, RbacConfig
# Database layer
from .database import ConnectionManager, ensure_rbac_indexes
from .exceptions import (
    ConfigurationError,
    InitializationError,
    RbacEngineError,
    RbacStorageError,
)
# Repositories
from .repositories import MongoRbacRepository, RbacRepository
# Rights
from .rights import list_rights, matches

__version__ = "0.1.0"

__all__ = [
    # Core
    "RbacEngine",
    "AccessDecision",
    "EffectiveGrants",
    "ExplainEntry",
    "Grant",
    "Layers",
    "Reason",
    "ScopeType",
    "SubjectType",
    # Repositories
    "RbacRepository",
    "MongoRbacRepository",
    # Database
    "ConnectionManager",
    "ensure_rbac_indexes",
    # Config
    "RbacConfig",
    "CollectionNames",
    # Errors
    "RbacEngineError",
    "RbacStorageError",
    "InitializationError",
    "ConfigurationError",
    # Rights
    "matches",
    "list_rights",
]
