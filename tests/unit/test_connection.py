"""
Unit tests for DatabaseConnectionPool lifecycle without a database.
"""

from unittest.mock import MagicMock

import pytest

from content_verify.core.settings import DatabaseSettings
from content_verify.warehouse import connection
from content_verify.warehouse.connection import DatabaseConnectionPool


@pytest.fixture
def pool_class(monkeypatch):
    """Replace psycopg_pool.ConnectionPool with a mock class"""
    mock_class = MagicMock()
    monkeypatch.setattr(connection, "ConnectionPool", mock_class)
    return mock_class


@pytest.mark.unit
class TestDatabaseConnectionPool:
    """Tests for DatabaseConnectionPool"""

    def test_requires_password(self, monkeypatch):
        monkeypatch.delenv("DB_PASSWORD", raising=False)

        with pytest.raises(ValueError, match="password"):
            DatabaseConnectionPool(password=None)

    def test_from_settings(self):
        pool = DatabaseConnectionPool.from_settings(
            DatabaseSettings(host="db", port=6543, password="pw", min_size=3, max_size=2)
        )

        assert "host=db" in pool.conninfo
        assert "port=6543" in pool.conninfo
        assert pool.max_size == 3

    def test_is_open_follows_lifecycle(self, pool_class):
        pool = DatabaseConnectionPool(password="pw")
        assert pool.is_open is False

        pool.open()
        assert pool.is_open is True

        pool.close()
        assert pool.is_open is False
        pool_class.return_value.close.assert_called_once()

    def test_open_twice_creates_one_pool(self, pool_class):
        pool = DatabaseConnectionPool(password="pw")

        pool.open()
        pool.open()

        pool_class.assert_called_once()

    def test_get_connection_requires_open_pool(self):
        pool = DatabaseConnectionPool(password="pw")

        with pytest.raises(RuntimeError, match="not open"):
            with pool.get_connection():
                pass

    def test_context_manager_closes(self, pool_class):
        with DatabaseConnectionPool(password="pw") as pool:
            assert pool.is_open

        assert pool.is_open is False
