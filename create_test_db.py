"""
Create the PostgreSQL test database and its schema.

Only needed when TEST_DATABASE_URL points at PostgreSQL; the default test run uses
a local SQLite file. Roles and the default admin are seeded so the database also
works for manual API checks.
"""
import asyncio
import os
import asyncpg
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = int(os.getenv("DB_PORT", "5432"))
DB_NAME = os.getenv("TEST_DB_NAME", "eventportal_test")

TEST_DATABASE_URL = f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)

from app.db.session import Base  # noqa: E402
from app.db.seed import seed_roles_and_admin  # noqa: E402
import app.db.models  # noqa: E402,F401


async def create_database() -> None:
    conn = await asyncpg.connect(
        user=DB_USER,
        password=DB_PASSWORD,
        host=DB_HOST,
        port=DB_PORT,
        database="postgres",
    )
    try:
        exists = await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", DB_NAME)
        if exists:
            print(f"Database '{DB_NAME}' already exists")
        else:
            await conn.execute(f'CREATE DATABASE "{DB_NAME}"')
            print(f"Database '{DB_NAME}' created")
    finally:
        await conn.close()


async def create_schema() -> None:
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with session_factory() as session:
            await seed_roles_and_admin(session)
    finally:
        await engine.dispose()
    print("Tables created and roles seeded")


async def main() -> None:
    await create_database()
    await create_schema()
    print(f"Test database ready: {DB_HOST}:{DB_PORT}/{DB_NAME}")
    print(f"Run the suite with: TEST_DATABASE_URL={TEST_DATABASE_URL} pytest")


if __name__ == "__main__":
    asyncio.run(main())
