from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from app.core.config import settings

# Create a global async engine.
# pool_pre_ping=True: validates connections; if dead, SQLAlchemy replaces them.
# IMPORTANT: This uses the ASYNC URL (postgresql+asyncpg://... or sqlite+aiosqlite://...)
engine = create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)

# Factory that creates AsyncSession objects on demand.
# expire_on_commit=False keeps rows readable after the batch commit in ingestion.
SessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False
)

# Sessions are opened per request in deps.get_session, never here.
