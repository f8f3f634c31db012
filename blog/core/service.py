"""Base class for Cassandra-backed services."""

from typing import TYPE_CHECKING, Any

from cassandra import DriverException

from blog.core.exceptions import UnexpectedError
from blog.core.logging import get_logger


if TYPE_CHECKING:
    from cassandra.cluster import Session
    from cassandra.query import PreparedStatement


logger = get_logger(__name__)


class CassandraService:
    """Holds the session and keyspace and prepares statements once.

    Subclasses implement ``_prepare_statements`` and run every query through
    :meth:`_execute`, which turns driver faults into :class:`UnexpectedError`.
    """

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        raise NotImplementedError

    def _prepare(self, cql: str) -> "PreparedStatement":
        return self.session.prepare(cql.format(keyspace=self.keyspace))

    async def _execute(
        self, statement: Any, params: tuple | list | None = None
    ) -> list[Any]:
        try:
            rows = await self.session.aexecute(statement, params or ())
        except DriverException as e:
            logger.error(
                "cassandra_query_failed",
                service=type(self).__name__,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UnexpectedError() from e
        return list(rows) if rows else []

    async def _fetch_one(
        self, statement: Any, params: tuple | list | None = None
    ) -> Any | None:
        rows = await self._execute(statement, params)
        return rows[0] if rows else None
