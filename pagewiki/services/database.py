"""Embedded SQLite store: pooled engine, per-call sessions, error mapping.

Every public repository operation opens its own session through
:meth:`Database.session` and never keeps a connection between calls.
Write sessions start with ``BEGIN IMMEDIATE`` so concurrent writers are
serialized by SQLite itself (waiting up to the busy timeout) instead of
failing on a lock upgrade.  Read sessions use a plain deferred ``BEGIN`` and,
with the database in WAL mode, never wait on a writer.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pagewiki.errors import StorageError
from pagewiki.models.records import Base

logger = logging.getLogger(__name__)

_WRITE_OPTION = "pagewiki_write"


def _on_connect(dbapi_connection, connection_record) -> None:
    # Let SQLAlchemy emit BEGIN itself (see _on_begin); pysqlite would defer it.
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def _on_begin(conn) -> None:
    if conn.get_execution_options().get(_WRITE_OPTION):
        conn.exec_driver_sql("BEGIN IMMEDIATE")
    else:
        conn.exec_driver_sql("BEGIN")


class Database:
    """Owns the engine for one wiki database file."""

    def __init__(self, path: Path, busy_timeout: float = 30.0):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(
            f"sqlite:///{self.path}",
            connect_args={"check_same_thread": False, "timeout": busy_timeout},
        )
        event.listen(self.engine, "connect", _on_connect)
        event.listen(self.engine, "begin", _on_begin)
        self._session_factory = sessionmaker(self.engine, expire_on_commit=False)

    def create_schema(self) -> None:
        """Create missing tables and indexes; existing data is left alone."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            logger.error("Could not create schema in %s: %s", self.path, exc)
            raise StorageError("create schema", str(self.path), exc) from exc

    @contextmanager
    def session(self, operation: str, target: Any = None, write: bool = False) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on any error.

        Pass ``write=True`` for sessions that modify data; their transaction
        takes the database write lock as soon as it begins.

        Database and I/O faults are logged with *operation* and *target* and
        re-raised as :class:`StorageError`; other exceptions propagate as-is.
        """
        session = self._session_factory()
        try:
            if write:
                session.connection(execution_options={_WRITE_OPTION: True})
            yield session
            session.commit()
        except (SQLAlchemyError, OSError) as exc:
            session.rollback()
            logger.error(
                "Storage failure during %s (%s): %s", operation, target, exc,
                extra={"operation": operation, "target": target},
            )
            raise StorageError(operation, target, exc) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.error("Database health check failed: %s", exc)
            return False

    def dispose(self) -> None:
        self.engine.dispose()
