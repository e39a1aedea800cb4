"""
Tests for database URL handling and the health ping.
"""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from gradepath.database import _engine_kwargs, normalize_database_url, ping


class TestDatabaseUrl:
    """Test DATABASE_URL normalization and engine options"""

    @pytest.mark.unit
    @pytest.mark.parametrize("url,expected", [
        ("postgres://u:p@host:5432/gradepath", "postgresql://u:p@host:5432/gradepath"),
        ("postgresql://u:p@host/gradepath", "postgresql://u:p@host/gradepath"),
        ("sqlite:///./gradepath.db", "sqlite:///./gradepath.db"),
    ])
    def test_normalize(self, url, expected):
        assert normalize_database_url(url) == expected

    @pytest.mark.unit
    def test_only_scheme_rewritten(self):
        url = "postgres://u:p@host/postgres://archive"
        assert normalize_database_url(url) == "postgresql://u:p@host/postgres://archive"

    @pytest.mark.unit
    def test_sqlite_options(self):
        kwargs = _engine_kwargs("sqlite:///./gradepath.db")
        assert kwargs["connect_args"] == {"check_same_thread": False}
        assert "pool_size" not in kwargs

    @pytest.mark.unit
    def test_postgres_pool_options(self):
        kwargs = _engine_kwargs("postgresql://u:p@host/gradepath")
        assert kwargs["pool_pre_ping"] is True
        assert kwargs["pool_size"] == 5
        assert "connect_args" not in kwargs


class TestPing:
    """Test the health check round trip"""

    @pytest.mark.integration
    def test_ping_connected(self, db: Session):
        assert ping(db) is True

    @pytest.mark.unit
    def test_ping_unreachable(self):
        class UnreachableSession:
            def execute(self, statement):
                raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        assert ping(UnreachableSession()) is False
