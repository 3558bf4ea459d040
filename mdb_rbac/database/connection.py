"""
Connection management for MDB_RBAC.

Owns the motor client used by ``MongoRbacRepository``: connection setup with a
ping check, pool configuration and shutdown.

This module is part of MDB_RBAC.
"""

import logging
import time

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from ..config import RbacConfig
from ..constants import (
    APP_NAME,
    DEFAULT_MAX_IDLE_TIME_MS,
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_MIN_POOL_SIZE,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
)
from ..exceptions import InitializationError
from ..observability import get_logger as get_contextual_logger

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)


class ConnectionManager:
    """
    Manages MongoDB connection lifecycle and configuration.

    Handles connection initialization, validation, and shutdown.
    """

    def __init__(
        self,
        mongo_uri: str,
        db_name: str,
        max_pool_size: int = DEFAULT_MAX_POOL_SIZE,
        min_pool_size: int = DEFAULT_MIN_POOL_SIZE,
        server_selection_timeout_ms: int = DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
    ) -> None:
        """
        Initialize the connection manager.

        Args:
            mongo_uri: MongoDB connection URI
            db_name: Database name
            max_pool_size: Maximum MongoDB connection pool size
            min_pool_size: Minimum MongoDB connection pool size
            server_selection_timeout_ms: Server selection timeout in milliseconds
        """
        self.mongo_uri = mongo_uri
        self.db_name = db_name
        self.max_pool_size = max_pool_size
        self.min_pool_size = min_pool_size
        self.server_selection_timeout_ms = server_selection_timeout_ms

        self._mongo_client: AsyncIOMotorClient | None = None
        self._mongo_db: AsyncIOMotorDatabase | None = None
        self._initialized: bool = False

    @classmethod
    def from_config(cls, config: RbacConfig) -> "ConnectionManager":
        """Create a connection manager from an RbacConfig."""
        return cls(
            mongo_uri=config.mongo_uri,
            db_name=config.db_name,
            max_pool_size=config.max_pool_size,
            min_pool_size=config.min_pool_size,
            server_selection_timeout_ms=config.server_selection_timeout_ms,
        )

    async def initialize(self) -> None:
        """
        Connect to MongoDB and verify the connection with a ping.

        Raises:
            InitializationError: If the server cannot be reached
        """
        start_time = time.time()

        if self._initialized:
            logger.warning("ConnectionManager already initialized. Skipping re-initialization.")
            return

        contextual_logger.info(
            "Initializing MongoDB connection",
            extra={
                "db_name": self.db_name,
                "max_pool_size": self.max_pool_size,
                "min_pool_size": self.min_pool_size,
            },
        )

        try:
            self._mongo_client = AsyncIOMotorClient(
                self.mongo_uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                appname=APP_NAME,
                maxPoolSize=self.max_pool_size,
                minPoolSize=self.min_pool_size,
                maxIdleTimeMS=DEFAULT_MAX_IDLE_TIME_MS,
                retryReads=True,
            )

            await self._mongo_client.admin.command("ping")
            self._mongo_db = self._mongo_client[self.db_name]

            self._initialized = True
            duration_ms = (time.time() - start_time) * 1000
            contextual_logger.info(
                "MongoDB connection initialized successfully",
                extra={
                    "db_name": self.db_name,
                    "pool_size": f"{self.min_pool_size}-{self.max_pool_size}",
                    "duration_ms": round(duration_ms, 2),
                },
            )
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            duration_ms = (time.time() - start_time) * 1000
            contextual_logger.critical(
                "MongoDB connection failed",
                extra={
                    "error_type": type(e).__name__,
                    "error": str(e),
                    "duration_ms": round(duration_ms, 2),
                },
                exc_info=True,
            )
            if self._mongo_client is not None:
                self._mongo_client.close()
                self._mongo_client = None
            raise InitializationError(
                f"Failed to connect to MongoDB: {e}",
                mongo_uri=self.mongo_uri,
                db_name=self.db_name,
                context={"error_type": type(e).__name__},
            ) from e

    async def shutdown(self) -> None:
        """
        Close the MongoDB client.

        This method is idempotent - it's safe to call multiple times.
        """
        if not self._initialized:
            return

        if self._mongo_client:
            self._mongo_client.close()
            contextual_logger.info("MongoDB connection closed.")

        self._initialized = False
        self._mongo_client = None
        self._mongo_db = None

    @property
    def mongo_client(self) -> AsyncIOMotorClient:
        """
        Get the MongoDB client.

        Raises:
            RuntimeError: If connection is not initialized
        """
        if not self._initialized or self._mongo_client is None:
            raise RuntimeError(
                "ConnectionManager not initialized. Call initialize() first.",
            )
        return self._mongo_client

    @property
    def mongo_db(self) -> AsyncIOMotorDatabase:
        """
        Get the MongoDB database.

        Raises:
            RuntimeError: If connection is not initialized
        """
        if not self._initialized or self._mongo_db is None:
            raise RuntimeError(
                "ConnectionManager not initialized. Call initialize() first.",
            )
        return self._mongo_db

    @property
    def initialized(self) -> bool:
        """Check if connection is initialized."""
        return self._initialized
