"""Cassandra connection and schema bootstrap."""

from blog.core.database.async_cassandra import (
    create_schema,
    init_async_cassandra,
    shutdown_async_cassandra,
)


__all__ = ["create_schema", "init_async_cassandra", "shutdown_async_cassandra"]
