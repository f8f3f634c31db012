# ruff: noqa: PLW0603
"""Cassandra cluster lifecycle and schema bootstrap.

``cassandra-asyncio-driver`` subclasses the DataStax cluster so that sessions
gain ``aexecute()``; services await it instead of blocking the event loop.
Connecting itself is synchronous and happens once, in the app lifespan.
"""

from cassandra.auth import PlainTextAuthProvider
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy
from cassandra_asyncio.cluster import Cluster

from blog.auth.models import AUTH_TABLES_CQL
from blog.categories.models import CATEGORIES_TABLES_CQL
from blog.comments.models import COMMENTS_TABLES_CQL
from blog.config.settings import Settings, get_settings
from blog.core.logging import get_logger
from blog.newsletter.models import NEWSLETTER_TABLES_CQL
from blog.posts.models import POSTS_TABLES_CQL
from blog.profiles.models import PROFILES_TABLES_CQL


logger = get_logger(__name__)

# Created in this order at startup
TABLE_GROUPS: dict[str, list[str]] = {
    "auth": AUTH_TABLES_CQL,
    "categories": CATEGORIES_TABLES_CQL,
    "posts": POSTS_TABLES_CQL,
    "comments": COMMENTS_TABLES_CQL,
    "profiles": PROFILES_TABLES_CQL,
    "newsletter": NEWSLETTER_TABLES_CQL,
}

KEYSPACE_CQL = """
    CREATE KEYSPACE IF NOT EXISTS {keyspace}
    WITH replication = {replication}
    AND durable_writes = true
"""


class AsyncCassandraConnection:
    """One cluster and its session."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.cluster: Cluster | None = None
        self.session = None

    def _auth_provider(self) -> PlainTextAuthProvider | None:
        if not (self.settings.cassandra_username and self.settings.cassandra_password):
            return None
        return PlainTextAuthProvider(
            username=self.settings.cassandra_username,
            password=self.settings.cassandra_password,
        )

    def connect(self):
        """Open the session; raises ``ConnectionError`` when no host answers."""
        if self.session is not None:
            return self.session

        s = self.settings
        self.cluster = Cluster(
            contact_points=s.cassandra_hosts,
            port=s.cassandra_port,
            auth_provider=self._auth_provider(),
            protocol_version=s.cassandra_protocol_version,
            load_balancing_policy=TokenAwarePolicy(DCAwareRoundRobinPolicy()),
            connect_timeout=s.cassandra_connect_timeout,
        )
        try:
            self.session = self.cluster.connect()
        except Exception as e:
            self.cluster.shutdown()
            self.cluster = None
            logger.error("cassandra_connection_failed", hosts=s.cassandra_hosts, error=str(e))
            raise ConnectionError(f"Failed to connect to Cassandra: {e}") from e

        self.session.default_timeout = s.cassandra_request_timeout
        logger.info("cassandra_connected", hosts=s.cassandra_hosts, port=s.cassandra_port)
        return self.session

    def close(self) -> None:
        if self.session is not None:
            self.session.shutdown()
            self.session = None
        if self.cluster is not None:
            self.cluster.shutdown()
            self.cluster = None
        logger.info("cassandra_closed")


def replication_for(settings: Settings) -> str:
    """Replication map literal for the keyspace."""
    if settings.is_production:
        return "{'class': 'NetworkTopologyStrategy', 'datacenter1': 3}"
    return "{'class': 'SimpleStrategy', 'replication_factor': 1}"


async def create_schema(session, settings: Settings) -> None:
    """Create the keyspace, switch to it and create every table and index."""
    keyspace = settings.cassandra_keyspace
    await session.aexecute(
        KEYSPACE_CQL.format(keyspace=keyspace, replication=replication_for(settings))
    )
    session.set_keyspace(keyspace)

    for group, statements in TABLE_GROUPS.items():
        for template in statements:
            await session.aexecute(template.format(keyspace=keyspace))
        logger.info("tables_ready", group=group, keyspace=keyspace)


_connection: AsyncCassandraConnection | None = None


async def init_async_cassandra():
    """Connect and bootstrap the schema; returns the session with ``aexecute()``."""
    global _connection

    settings = get_settings()
    connection = AsyncCassandraConnection(settings)
    session = connection.connect()
    try:
        await create_schema(session, settings)
    except Exception:
        connection.close()
        raise

    _connection = connection
    logger.info("cassandra_initialized", keyspace=settings.cassandra_keyspace)
    return session


async def shutdown_async_cassandra() -> None:
    global _connection

    if _connection is not None:
        _connection.close()
        _connection = None
