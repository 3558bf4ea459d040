"""
Unit tests for ConnectionManager.

Tests connection initialization, error handling, and shutdown.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from mdb_rbac.config import RbacConfig
from mdb_rbac.database import ConnectionManager
from mdb_rbac.exceptions import InitializationError


@pytest.fixture
def connection_config():
    """Provide default configuration for ConnectionManager."""
    return {
        "mongo_uri": "mongodb://localhost:27017",
        "db_name": "test_db",
        "max_pool_size": 10,
        "min_pool_size": 1,
    }


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    return client


class TestConnectionManagerInitialization:
    """Test successful initialization."""

    @pytest.mark.asyncio
    async def test_initialize_pings_and_selects_database(self, connection_config, mock_client):
        with patch(
            "mdb_rbac.database.connection.AsyncIOMotorClient", return_value=mock_client
        ) as client_cls:
            manager = ConnectionManager(**connection_config)
            await manager.initialize()

        assert manager.initialized is True
        mock_client.admin.command.assert_awaited_once_with("ping")
        assert manager.mongo_client is mock_client
        assert manager.mongo_db is mock_client["test_db"]
        kwargs = client_cls.call_args.kwargs
        assert kwargs["maxPoolSize"] == 10
        assert kwargs["minPoolSize"] == 1
        assert kwargs["appname"] == "MDB_RBAC"

    @pytest.mark.asyncio
    async def test_initialize_twice_is_noop(self, connection_config, mock_client):
        with patch(
            "mdb_rbac.database.connection.AsyncIOMotorClient", return_value=mock_client
        ) as client_cls:
            manager = ConnectionManager(**connection_config)
            await manager.initialize()
            await manager.initialize()

        assert client_cls.call_count == 1

    def test_from_config(self):
        config = RbacConfig(
            mongo_uri="mongodb://db:27017",
            db_name="app",
            max_pool_size=20,
            min_pool_size=2,
            server_selection_timeout_ms=3000,
        )

        manager = ConnectionManager.from_config(config)

        assert manager.mongo_uri == "mongodb://db:27017"
        assert manager.db_name == "app"
        assert manager.max_pool_size == 20
        assert manager.min_pool_size == 2
        assert manager.server_selection_timeout_ms == 3000


class TestConnectionManagerErrorHandling:
    """Test error handling during connection initialization."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [ConnectionFailure("refused"), ServerSelectionTimeoutError("timed out")],
    )
    async def test_initialize_connection_errors(self, connection_config, mock_client, error):
        """Test that driver connection errors become InitializationError."""
        mock_client.admin.command = AsyncMock(side_effect=error)

        with patch("mdb_rbac.database.connection.AsyncIOMotorClient", return_value=mock_client):
            manager = ConnectionManager(**connection_config)

            with pytest.raises(InitializationError) as exc_info:
                await manager.initialize()

        assert "Failed to connect to MongoDB" in str(exc_info.value)
        assert exc_info.value.context["error_type"] == type(error).__name__
        assert exc_info.value.db_name == "test_db"
        mock_client.close.assert_called_once()
        assert manager.initialized is False


class TestConnectionManagerAccessors:
    """Accessors require an initialized manager."""

    def test_mongo_client_before_initialize(self, connection_config):
        manager = ConnectionManager(**connection_config)
        with pytest.raises(RuntimeError, match="not initialized"):
            _ = manager.mongo_client

    def test_mongo_db_before_initialize(self, connection_config):
        manager = ConnectionManager(**connection_config)
        with pytest.raises(RuntimeError, match="not initialized"):
            _ = manager.mongo_db


class TestConnectionManagerShutdown:
    """Test shutdown behaviour."""

    @pytest.mark.asyncio
    async def test_shutdown_closes_client(self, connection_config, mock_client):
        with patch("mdb_rbac.database.connection.AsyncIOMotorClient", return_value=mock_client):
            manager = ConnectionManager(**connection_config)
            await manager.initialize()

        await manager.shutdown()

        mock_client.close.assert_called_once()
        assert manager.initialized is False
        with pytest.raises(RuntimeError):
            _ = manager.mongo_db

    @pytest.mark.asyncio
    async def test_shutdown_is_idempotent(self, connection_config, mock_client):
        with patch("mdb_rbac.database.connection.AsyncIOMotorClient", return_value=mock_client):
            manager = ConnectionManager(**connection_config)
            await manager.initialize()

        await manager.shutdown()
        await manager.shutdown()

        mock_client.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_shutdown_without_initialize(self, connection_config):
        manager = ConnectionManager(**connection_config)
        await manager.shutdown()
        assert manager.initialized is False
