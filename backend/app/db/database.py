from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import DeclarativeBase

from app.config import Config


# SQLAlchemy Base for ORM models
class Base(DeclarativeBase):
    pass


def get_async_url(url: str, db_type: str) -> str:
    """Convert database URL to async SQLAlchemy format."""
    if db_type == "postgresql":
        return url.replace("postgresql://", "postgresql+asyncpg://")
    elif db_type == "sqlite":
        return url.replace("sqlite://", "sqlite+aiosqlite://")
    return url


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine for an already async-formatted URL.

    SQLite's LIKE ignores ASCII case by default, so every SQLite
    connection is switched to case-sensitive matching to behave like
    PostgreSQL.
    """
    engine = create_async_engine(url, echo=Config.DATABASE_ECHO, **kwargs)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine.sync_engine, "connect")
        def _case_sensitive_like(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA case_sensitive_like = ON")
            cursor.close()

    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Database:
    """Owns the engine and session factory for the configured database."""

    def __init__(self):
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None
        self.db_type = Config.DATABASE_TYPE

    async def connect(self):
        """Create database engine."""
        self.engine = build_engine(get_async_url(Config.DATABASE_URL, self.db_type))
        self.session_factory = build_session_factory(self.engine)

    async def disconnect(self):
        """Close database engine."""
        if self.engine:
            await self.engine.dispose()
        self.engine = None
        self.session_factory = None

    async def create_tables(self):
        """Create all ORM tables that do not exist yet."""
        if not self.engine:
            await self.connect()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        if not self.engine:
            await self.connect()

        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True


db = Database()


async def get_session() -> AsyncSession:
    """FastAPI dependency yielding one session per request."""
    if not db.session_factory:
        await db.connect()

    async with db.session_factory() as session:
        yield session
