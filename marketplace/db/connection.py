"""Relational database engine and connection management."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from marketplace.db.config import DatabaseConfig

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Engine (connection pool) manager.

    Reads go through ``get_connection()``; every write sequence goes through
    ``transaction()`` so it commits or rolls back as a unit.
    """

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self._config = config or DatabaseConfig.from_env()
        self._engine: Optional[Engine] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self.connect()
        return self._engine

    def connect(self):
        url = self._config.sqlalchemy_url()
        if str(url).startswith("sqlite"):
            # in-memory databases must share one connection across the pool
            self._engine = create_engine(
                url,
                echo=self._config.echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
            event.listen(self._engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self._engine = create_engine(
                url,
                echo=self._config.echo,
                pool_size=self._config.pool_size,
                pool_pre_ping=True,
            )
        logger.info("Database engine created (%s)", self._engine.dialect.name)

    def init_tables(self):
        from marketplace.db.tables import metadata

        metadata.create_all(self.engine)
        logger.info("All tables initialized")

    def drop_tables(self):
        from marketplace.db.tables import metadata

        metadata.drop_all(self.engine)

    @contextmanager
    def get_connection(self) -> Iterator[Connection]:
        conn = self.engine.connect()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Connection inside a transaction; commits on success, rolls back on any error."""
        with self.engine.begin() as conn:
            yield conn

    def dispose(self):
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None


_db = None


def get_database() -> Database:
    global _db
    if _db is None:
        _db = Database()
    return _db
