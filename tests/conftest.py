"""Shared fixtures.

Services run against a mocked Cassandra session: ``prepare`` returns one
distinct statement object per CQL string, and ``aexecute`` answers from a
statement -> rows table installed with the ``route_rows`` fixture.
"""

import os


os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_REQUESTS", "false")

from unittest.mock import AsyncMock, Mock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from cassandra.cluster import Session  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from blog.auth.permissions import UserRole  # noqa: E402
from blog.auth.schemas import UserResponse  # noqa: E402
from tests.factories import PreparedStub, calls_for, token_for  # noqa: E402


# ==============================================================================
# Cassandra
# ==============================================================================


@pytest.fixture
def mock_session():
    """Mock Cassandra session with per-query prepared statements."""
    session = Mock(spec=Session)
    session.prepare = Mock(side_effect=PreparedStub)
    # cassandra-asyncio-driver exposes aexecute on the session
    session.aexecute = AsyncMock(return_value=[])
    return session


@pytest.fixture
def route_rows(mock_session):
    """Install a statement -> rows table on the mocked session.

    Values may be a list of rows or a callable receiving the bound params.
    Statements missing from the table return no rows.
    """

    def _route(table: dict) -> None:
        async def _aexecute(statement, params=()):
            answer = table.get(statement, [])
            return answer(params) if callable(answer) else answer

        mock_session.aexecute.side_effect = _aexecute

    return _route


@pytest.fixture
def executed(mock_session):
    """Params of every call made with a given statement."""
    return lambda statement: calls_for(mock_session, statement)


@pytest.fixture
def mock_redis():
    """Mock Redis client."""
    redis_mock = AsyncMock()
    mock_pipe = Mock()
    mock_pipe.incr = Mock()
    mock_pipe.expire = Mock()
    mock_pipe.execute = AsyncMock(return_value=[1, True, 1, True])
    redis_mock.pipeline = Mock(return_value=mock_pipe)
    redis_mock.get = AsyncMock(return_value=None)
    return redis_mock


# ==============================================================================
# Accounts
# ==============================================================================


@pytest.fixture
def user() -> UserResponse:
    return UserResponse(
        id=uuid4(), username="alice", email="alice@example.com", role="user"
    )


@pytest.fixture
def admin() -> UserResponse:
    return UserResponse(
        id=uuid4(),
        username="root",
        email="root@example.com",
        role=UserRole.ADMIN.value,
    )


@pytest.fixture
def auth_headers(user: UserResponse) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
def admin_headers(admin: UserResponse) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(admin)}"}


# ==============================================================================
# Application
# ==============================================================================


@pytest.fixture
def app():
    """Application without lifespan; tests install services on ``app.state``."""
    from blog.main import create_app

    return create_app()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
