from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


def build_database_url(
    user: str,
    password: str,
    host: str,
    port: str,
    db: str,
    url: Optional[str] = None,
) -> str:
    """Return the async SQLAlchemy URL, preferring an explicit one."""
    if url:
        return url
    return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db}"


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine that owns the connection pool."""
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    # Rows are converted to value objects after commit, so keep them loaded
    return async_sessionmaker(engine, autoflush=False, expire_on_commit=False)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Get database session."""
    async with request.app.state.session_factory() as db:
        yield db
