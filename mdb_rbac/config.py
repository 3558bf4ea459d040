"""
Configuration management for MDB_RBAC.

Configuration is validated with Pydantic. The engine itself never reads the
environment; callers build an ``RbacConfig`` (directly or via ``from_env``)
and pass what they need explicitly.
"""

import os

from pydantic import BaseModel, Field, ValidationError, model_validator

from .constants import (
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_MIN_POOL_SIZE,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
    GRANTS_COLLECTION,
    GROUP_MEMBERS_COLLECTION,
    GROUP_ROLES_COLLECTION,
    GROUPS_COLLECTION,
    ORG_MEMBERS_COLLECTION,
    USER_ROLES_COLLECTION,
)
from .exceptions import ConfigurationError


class CollectionNames(BaseModel):
    """Names of the collections the engine reads from."""

    org_members: str = Field(ORG_MEMBERS_COLLECTION, min_length=1)
    user_roles: str = Field(USER_ROLES_COLLECTION, min_length=1)
    groups: str = Field(GROUPS_COLLECTION, min_length=1)
    group_members: str = Field(GROUP_MEMBERS_COLLECTION, min_length=1)
    group_roles: str = Field(GROUP_ROLES_COLLECTION, min_length=1)
    grants: str = Field(GRANTS_COLLECTION, min_length=1)

    @classmethod
    def from_env(cls) -> "CollectionNames":
        """
        Read collection name overrides from the environment.

        Each field can be overridden with ``RBAC_<FIELD>_COLLECTION``,
        e.g. ``RBAC_GRANTS_COLLECTION``.
        """
        overrides = {}
        for name in cls.model_fields:
            value = os.getenv(f"RBAC_{name.upper()}_COLLECTION")
            if value:
                overrides[name] = value
        return cls(**overrides)


class RbacConfig(BaseModel):
    """
    MDB_RBAC configuration.

    Example:
        # Using environment variables
        config = RbacConfig.from_env()

        # Or using direct parameters
        config = RbacConfig(mongo_uri="mongodb://localhost:27017", db_name="app")
    """

    mongo_uri: str = Field(..., min_length=1, description="MongoDB connection URI")
    db_name: str = Field(..., min_length=1, description="Database name")
    max_pool_size: int = Field(
        DEFAULT_MAX_POOL_SIZE, ge=1, description="Maximum connection pool size"
    )
    min_pool_size: int = Field(
        DEFAULT_MIN_POOL_SIZE, ge=1, description="Minimum connection pool size"
    )
    server_selection_timeout_ms: int = Field(
        DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
        ge=1000,
        description="Server selection timeout in milliseconds",
    )
    collections: CollectionNames = Field(default_factory=CollectionNames)

    @model_validator(mode="after")
    def _check_pool_bounds(self) -> "RbacConfig":
        if self.min_pool_size > self.max_pool_size:
            raise ValueError(
                f"min_pool_size ({self.min_pool_size}) cannot be greater than "
                f"max_pool_size ({self.max_pool_size})"
            )
        return self

    @classmethod
    def from_env(cls) -> "RbacConfig":
        """
        Build configuration from environment variables.

        Reads MONGO_URI, DB_NAME, MONGO_MAX_POOL_SIZE, MONGO_MIN_POOL_SIZE,
        MONGO_SERVER_SELECTION_TIMEOUT_MS and RBAC_<NAME>_COLLECTION overrides.

        Raises:
            ConfigurationError: If a value is missing or invalid
        """
        raw = {
            "mongo_uri": os.getenv("MONGO_URI", ""),
            "db_name": os.getenv("DB_NAME", ""),
            "max_pool_size": os.getenv("MONGO_MAX_POOL_SIZE", str(DEFAULT_MAX_POOL_SIZE)),
            "min_pool_size": os.getenv("MONGO_MIN_POOL_SIZE", str(DEFAULT_MIN_POOL_SIZE)),
            "server_selection_timeout_ms": os.getenv(
                "MONGO_SERVER_SELECTION_TIMEOUT_MS",
                str(DEFAULT_SERVER_SELECTION_TIMEOUT_MS),
            ),
        }
        try:
            return cls(collections=CollectionNames.from_env(), **raw)
        except ValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            loc = first.get("loc") or ()
            config_key = ".".join(str(part) for part in loc) or None
            raise ConfigurationError(
                f"Invalid RBAC configuration: {e.error_count()} error(s)",
                config_key=config_key,
                context={"errors": [err.get("msg") for err in e.errors()]},
            ) from e
