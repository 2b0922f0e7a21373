"""Async engine and per-request sessions for the refresh token table.

Stores commit their own writes (see RefreshTokenRepository.commit), so a token
value is durable before a route puts it in a cookie. The commit on session exit
only flushes whatever a caller left pending; by the time it runs the response
may already be on the wire.
"""
import logging
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class DatabaseManager:
    """Owns the engine and hands out one AsyncSession per request."""

    def __init__(self):
        self._engine = None
        self._session_factory = None
        self._initialized = False

    def init(self, database_url: str, echo: bool = False, pool_size: int = 5) -> None:
        """
        Build the engine and session factory. Calling it twice is a no-op.

        Args:
            database_url: postgresql+asyncpg URL in deployments, sqlite+aiosqlite for local runs
            echo: Log emitted SQL
            pool_size: Pooled connections for PostgreSQL; 0 disables pooling
        """
        if self._initialized:
            logger.warning("Database already initialized, skipping re-initialization")
            return

        if database_url.startswith("postgresql://"):
            database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

        logger.info("Initializing refresh token database")

        if database_url.startswith("sqlite"):
            self._engine = create_async_engine(database_url, echo=echo)
        elif pool_size == 0:
            # One connection per session, for short-lived workers
            self._engine = create_async_engine(
                database_url,
                echo=echo,
                poolclass=NullPool,
            )
        else:
            self._engine = create_async_engine(
                database_url,
                echo=echo,
                pool_size=pool_size,
                max_overflow=10,
                pool_pre_ping=True,
                pool_recycle=300,
            )

        # expire_on_commit off: records are read back after the store commits
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

        self._initialized = True
        logger.info("Refresh token database ready")

    async def create_tables(self) -> None:
        """Create the refresh_tokens table when DB_CREATE_TABLES is set. Alembic owns it otherwise."""
        if not self._initialized or not self._engine:
            raise RuntimeError("Database not initialized. Call init() first.")

        import app.models  # noqa: F401  registers mappers on Base.metadata

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def close(self) -> None:
        if self._engine:
            await self._engine.dispose()
            self._initialized = False
            logger.info("Database connection closed")

    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield a session for one request.

        Anything still pending when the request ends is committed; an exception
        raised into the generator rolls it back instead. Token writes do not
        rely on this exit path because it runs after the response is sent.
        """
        if not self._initialized or not self._session_factory:
            raise RuntimeError("Database not initialized. Call init() first.")

        async with self._session_factory() as session:
            try:
                await session.rollback()
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    @property
    def is_initialized(self) -> bool:
        return self._initialized


db_manager = DatabaseManager()
