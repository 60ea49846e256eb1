"""
Database gateway wrapping a pooled SQLAlchemy engine.

The application constructs one Database, connects it in the lifespan handler
and hands it to request handlers through the get_database dependency.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import Executable

from jobboard.core.config import Settings

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()

Statement = Union[str, Executable]


class DatabaseNotConnectedError(RuntimeError):
    """Raised when a query is attempted before connect() or after dispose()."""


class Database:
    """
    Owner of the connection pool.

    Nothing touches the network until connect() is called.
    """

    def __init__(self, url: str, **engine_options: Any):
        self.url = url
        self.engine_options = engine_options
        self._engine: Optional[Engine] = None
        self._ready = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url = settings.SQLALCHEMY_DATABASE_URL
        if url.startswith("sqlite"):
            return cls(url, connect_args={"check_same_thread": False})
        return cls(
            url,
            pool_pre_ping=True,  # Verify connections before using them
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise DatabaseNotConnectedError("Database is not connected")
        return self._engine

    @property
    def is_ready(self) -> bool:
        return self._ready

    def describe(self) -> Dict[str, Any]:
        """Connection parameters that are safe to log."""
        url = make_url(self.url)
        return {
            "driver": url.drivername,
            "user": url.username,
            "host": url.host,
            "port": url.port,
            "database": url.database,
        }

    def connect(self) -> None:
        if self._engine is not None:
            return

        params = self.describe()
        logger.info(
            f"Creating connection pool for database '{params['database']}' "
            f"on {params['host']}:{params['port']} as user '{params['user']}'"
        )
        self._engine = create_engine(self.url, **self.engine_options)

        @event.listens_for(self._engine, "connect")
        def on_connect(dbapi_connection, connection_record):
            logger.info("Database pool: client connected")

        @event.listens_for(self._engine, "invalidate")
        def on_invalidate(dbapi_connection, connection_record, exception):
            logger.error(f"Database pool: connection invalidated: {exception}")

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
        self._ready = False
        logger.info("Database pool disposed")

    def create_schema(self) -> None:
        """Create tables registered on Base if they do not exist yet."""
        from jobboard.models import job  # noqa: F401  Import models to register them

        Base.metadata.create_all(bind=self.engine)

    def execute(self, statement: Statement, parameters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Run a single statement in its own transaction.

        Args:
            statement: SQLAlchemy Core statement, or raw SQL with :named bind parameters
            parameters: Bind parameter values

        Returns:
            Result rows as dictionaries (empty for statements without rows)
        """
        if isinstance(statement, str):
            statement = text(statement)

        with self.engine.begin() as connection:
            result = connection.execute(statement, parameters or {})
            if not result.returns_rows:
                return []
            return [dict(row) for row in result.mappings()]

    def health_check(self) -> bool:
        """
        Verify connectivity and update readiness. Never raises.
        """
        try:
            rows = self.execute("SELECT CURRENT_TIMESTAMP AS now")
        except (SQLAlchemyError, DatabaseNotConnectedError) as e:
            self._ready = False
            logger.error(f"Database connection test FAILED: {e}", extra={"config_used": self.describe()})
            return False

        self._ready = True
        logger.info(f"Database connection test successful. DB current time: {rows[0]['now']}")
        return True


def get_database(request: Request) -> Database:
    """
    Dependency returning the application's database gateway.
    Used in FastAPI endpoints with Depends(get_database)
    """
    return request.app.state.database
