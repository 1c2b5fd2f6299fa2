from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, AsyncEngine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./esports.db")

def get_database_url():
    """Helper to retrieve DB URL in scripts context"""
    return DATABASE_URL

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FK constraints (and ON DELETE RESTRICT) unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Creates an async engine for the given URL.
    SQLite gets FK enforcement; an in-memory SQLite URL shares one connection
    so every session sees the same database.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            kwargs["poolclass"] = StaticPool
        new_engine = create_async_engine(url, echo=echo, **kwargs)
        event.listen(new_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return new_engine

    return create_async_engine(
        url,
        echo=echo,
        pool_size=int(os.getenv("DB_POOL_SIZE", "20")),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "20")),
    )

def get_session_maker(bind: AsyncEngine = None):
    """Session factory for the given engine (the app engine by default)"""
    return sessionmaker(
        bind=bind if bind is not None else engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

engine = build_engine(DATABASE_URL, echo=os.getenv("DB_ECHO", "false").lower() == "true")
AsyncSessionLocal = get_session_maker(engine)

Base = declarative_base()

async def create_tables(bind: AsyncEngine = None):
    """Safe create (only creates tables that are missing)"""
    async with (bind if bind is not None else engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

# Dependency for API routes
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session
