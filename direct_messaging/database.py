"""Async engine, session factory and the FastAPI session dependency."""

import logging
import os
from typing import Any, AsyncGenerator, Dict

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for conversations, memberships, messages and attachments."""

    pass


DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable is required")

SQL_DEBUG = os.getenv("SQL_DEBUG", "false").lower() == "true"
# Local development only; deployed schemas are managed by Alembic
DB_CREATE_SCHEMA = os.getenv("DB_CREATE_SCHEMA", "false").lower() == "true"


def engine_options(database_url: str) -> Dict[str, Any]:
    """Driver-specific engine arguments."""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
        "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "10")),
    }


engine = create_async_engine(
    DATABASE_URL, echo=SQL_DEBUG, future=True, **engine_options(DATABASE_URL)
)

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Dependency for code that manages its own short-lived sessions."""
    return AsyncSessionLocal


async def init_db() -> None:
    """Create missing tables when DB_CREATE_SCHEMA is enabled."""
    if not DB_CREATE_SCHEMA:
        return

    import direct_messaging.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema created from model metadata")


async def close_db() -> None:
    """Close database connections on shutdown."""
    await engine.dispose()
