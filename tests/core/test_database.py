"""Tests for schema bootstrap."""

import pytest

from blog.config.settings import Settings
from blog.core.database import create_schema
from blog.core.database.async_cassandra import TABLE_GROUPS, replication_for


def _statements(mock_session) -> list[str]:
    return [" ".join(c.args[0].split()) for c in mock_session.aexecute.await_args_list]


class TestReplication:
    def test_single_node_outside_production(self) -> None:
        assert "SimpleStrategy" in replication_for(Settings(environment="development"))

    def test_network_topology_in_production(self) -> None:
        settings = Settings(environment="production", auth_secret_key="x" * 40)
        assert "NetworkTopologyStrategy" in replication_for(settings)


class TestCreateSchema:
    @pytest.mark.asyncio
    async def test_keyspace_first_then_every_table(self, mock_session) -> None:
        settings = Settings(cassandra_keyspace="blog_test")

        await create_schema(mock_session, settings)

        statements = _statements(mock_session)
        assert statements[0].startswith("CREATE KEYSPACE IF NOT EXISTS blog_test")
        mock_session.set_keyspace.assert_called_once_with("blog_test")
        expected = sum(len(group) for group in TABLE_GROUPS.values())
        assert len(statements) == 1 + expected
        assert all("{keyspace}" not in s for s in statements)

    @pytest.mark.asyncio
    async def test_groups_created_in_dependency_order(self, mock_session) -> None:
        await create_schema(mock_session, Settings(cassandra_keyspace="blog"))

        statements = _statements(mock_session)
        first_users = next(i for i, s in enumerate(statements) if "blog.users" in s)
        first_comments = next(i for i, s in enumerate(statements) if "blog.comments" in s)
        assert first_users < first_comments


class TestSettings:
    def test_default_secret_rejected_in_production(self) -> None:
        with pytest.raises(ValueError, match="AUTH_SECRET_KEY"):
            Settings(environment="production")

    def test_short_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            Settings(auth_secret_key="short")
