"""
Constants for MDB_RBAC.

This module contains shared constants: storage collection names, record
statuses and connection defaults.
"""

from typing import Final

# ============================================================================
# COLLECTION NAMES
# ============================================================================

ORG_MEMBERS_COLLECTION: Final[str] = "organizationmembers"
"""Organization membership records (userId, orgId, status)."""

USER_ROLES_COLLECTION: Final[str] = "rbac_user_roles"
"""Direct user -> role assignments."""

GROUPS_COLLECTION: Final[str] = "rbac_groups"
"""Group definitions (isGlobal, orgId, status)."""

GROUP_MEMBERS_COLLECTION: Final[str] = "rbac_group_members"
"""User -> group memberships."""

GROUP_ROLES_COLLECTION: Final[str] = "rbac_group_roles"
"""Group -> role assignments."""

GRANTS_COLLECTION: Final[str] = "rbac_grants"
"""Grant records (subject, scope, right, effect)."""

# ============================================================================
# RECORD STATUS VALUES
# ============================================================================

MEMBERSHIP_STATUS_ACTIVE: Final[str] = "active"
"""Only memberships with this status participate in authorization."""

GROUP_STATUS_ACTIVE: Final[str] = "active"
"""Only groups with this status participate in authorization."""

# ============================================================================
# MATCHING
# ============================================================================

RIGHT_WILDCARD: Final[str] = "*"
"""Wildcard character in granted right patterns."""

MAX_PATTERN_CACHE_SIZE: Final[int] = 1024
"""Maximum number of compiled right patterns kept in memory."""

# ============================================================================
# DATABASE CONSTANTS
# ============================================================================

DEFAULT_MAX_POOL_SIZE: Final[int] = 50
"""Default maximum MongoDB connection pool size."""

DEFAULT_MIN_POOL_SIZE: Final[int] = 10
"""Default minimum MongoDB connection pool size."""

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 5000
"""Default server selection timeout in milliseconds."""

DEFAULT_MAX_IDLE_TIME_MS: Final[int] = 45000
"""Default maximum idle time before closing connections (milliseconds)."""

APP_NAME: Final[str] = "MDB_RBAC"
"""Application name reported to the MongoDB server."""
