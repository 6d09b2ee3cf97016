# /codelab_store/db/connection.py

"""
This module owns the single, process-wide connection to the backing store.

The `ConnectionManager` establishes its engine lazily. The first caller of
`get_engine()` performs the connection attempt, and every caller that arrives
while that attempt is in flight waits on the same `Future` instead of starting
a second one. A failed attempt is delivered to all of those waiters and then
forgotten, so the next call starts a fresh attempt.
"""

import logging
import threading
from contextlib import contextmanager
from concurrent.futures import Future
from typing import Callable, Generator, Optional, Tuple

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..core.config import DATABASE_URL, DB_ECHO
from ..core.exceptions import StoreUnavailableError
from .base import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class ConnectionManager:
    def __init__(self, url: str, engine_factory: Callable[..., Engine] = create_engine, echo: bool = False):
        self.url = url
        self._engine_factory = engine_factory
        self._echo = echo
        self._lock = threading.Lock()
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._pending: Optional[Future] = None
        # Bumped by close(); an attempt that started under an older value is discarded.
        self._generation = 0

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def get_engine(self) -> Engine:
        """
        Returns the shared engine, connecting on first use.

        Raises:
            StoreUnavailableError: if the connection attempt this call joined
                (or started) failed, or the manager was closed meanwhile.
        """
        return self._ensure_connected()[0]

    def get_session(self) -> Session:
        """Opens a new ORM session bound to the shared engine."""
        _, session_factory = self._ensure_connected()
        return session_factory()

    def _ensure_connected(self) -> Tuple[Engine, sessionmaker]:
        # The engine and its session factory are handed out as one pair, so a
        # concurrent close() cannot leave a caller holding half of it.
        with self._lock:
            if self._engine is not None:
                return self._engine, self._session_factory
            owner = self._pending is None
            if owner:
                self._pending = Future()
            pending = self._pending
            generation = self._generation

        if not owner:
            # Join the attempt already in flight; its outcome is ours.
            return pending.result()

        try:
            engine = self._connect()
        except BaseException as e:
            if isinstance(e, Exception):
                error = StoreUnavailableError(f"Unable to connect to the database: {e}")
                error.__cause__ = e
                logger.error("Connection attempt to the database failed: %s", e)
            else:
                # Interrupts and cancellations still resolve the attempt.
                error = e
            with self._lock:
                self._pending = None
            pending.set_exception(error)
            raise error

        with self._lock:
            closed_meanwhile = generation != self._generation
            if not closed_meanwhile:
                self._engine = engine
                self._session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
                handles = (self._engine, self._session_factory)
            self._pending = None

        if closed_meanwhile:
            engine.dispose()
            error = StoreUnavailableError("The connection manager was closed while connecting.")
            logger.info("Discarded a connection established after close().")
            pending.set_exception(error)
            raise error

        pending.set_result(handles)
        return handles

    def close(self) -> None:
        """
        Releases the engine if one was ever established. Safe to call repeatedly.
        A connection attempt still in flight is disposed when it completes.
        """
        with self._lock:
            self._generation += 1
            engine = self._engine
            self._engine = None
            self._session_factory = None
        if engine is not None:
            engine.dispose()
            logger.info("Database connection closed.")

    def _connect(self) -> Engine:
        is_sqlite = self.url.startswith("sqlite")
        # The 'check_same_thread' argument is only needed for SQLite.
        engine_args = {"connect_args": {"check_same_thread": False}} if is_sqlite else {}
        logger.info("Connecting to database at %s", self._safe_url())
        engine = self._engine_factory(self.url, echo=self._echo, **engine_args)
        if is_sqlite:
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=engine)
        except Exception:
            engine.dispose()
            raise
        return engine

    def _safe_url(self) -> str:
        # Never log credentials embedded in the URL.
        if "@" in self.url:
            scheme, _, rest = self.url.partition("://")
            return f"{scheme}://***@{rest.split('@', 1)[1]}"
        return self.url


# The single connection manager shared by the whole process.
connection_manager = ConnectionManager(DATABASE_URL, echo=DB_ECHO)


# Dependency to get a DB session. This will be used in our API routers.
def get_db() -> Generator[Session, None, None]:
    db = connection_manager.get_session()
    try:
        yield db
    finally:
        db.close()


def is_store_unreachable(exc: BaseException, bind) -> bool:
    """
    Tells a lost or refused connection apart from every other database error.

    Operational errors also cover lock timeouts and full disks, so for those
    the store is pinged on a fresh connection; only a failed ping counts.
    """
    if isinstance(exc, InterfaceError):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    if isinstance(exc, OperationalError):
        try:
            with bind.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return True
    return False


@contextmanager
def store_connection_guard(session: Session):
    """Re-raises connection failures inside the block as `StoreUnavailableError`."""
    try:
        yield
    except SQLAlchemyError as e:
        if is_store_unreachable(e, session.get_bind()):
            session.rollback()
            logger.error("The database became unreachable: %s", e)
            raise StoreUnavailableError(f"The database is unreachable: {e}") from e
        raise
