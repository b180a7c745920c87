from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool
from digitalhouse.core.config import settings


def build_engine(db_url: str, echo: bool = False):
    """
    SQLite (aiosqlite) is used for local development and tests,
    PostgreSQL (asyncpg) everywhere else.
    """
    if db_url.startswith("sqlite"):
        return create_async_engine(
            db_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )
    return create_async_engine(
        db_url,
        echo=echo,
        future=True,
        poolclass=NullPool,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.ENVIRONMENT == "development")

# Create Session Factory
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

async def get_db() -> AsyncSession:
    """
    Dependency for getting an async database session.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
