from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from app.core.config import settings

engine_options = {"echo": False}
if not settings.DATABASE_URL.startswith("sqlite"):
    engine_options.update(
        pool_size=20,              # Number of permanent connections to maintain
        max_overflow=10,           # Maximum number of connections to allow beyond pool_size
        pool_pre_ping=True,        # Verify connections before using them
        pool_recycle=3600,         # Recycle connections after 1 hour
    )

engine = create_async_engine(settings.DATABASE_URL, **engine_options)
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
Base = declarative_base()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


# Upper bound of the Integer primary keys on every backend
MAX_ROW_ID = 2**31 - 1


def in_id_range(value: int) -> bool:
    return 1 <= value <= MAX_ROW_ID
