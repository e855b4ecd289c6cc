import os
from pydantic import BaseModel

# Centralized application settings.
# Every value can be overridden from the environment (or backend/.env via docker compose).

class Settings(BaseModel):
    # Async SQLAlchemy URL (used by the app at runtime)
    # like postgresql+asyncpg://ledger:ledgerpw@db:5432/ledger
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./ledger.db")

    # Sync SQLAlchemy URL (handy for Alembic migrations)
    # like postgresql+psycopg://ledger:ledgerpw@db:5432/ledger
    SYNC_DATABASE_URL: str | None = os.getenv("SYNC_DATABASE_URL")

    # Rate table endpoint, e.g. https://v6.exchangerate-api.com/v6/<key>/latest/INR
    # Rates are units of each currency per one unit of BASE_CURRENCY.
    RATE_PROVIDER_URL: str = os.getenv("RATE_PROVIDER_URL", "")
    REQUEST_TIMEOUT_MS: int = int(os.getenv("REQUEST_TIMEOUT_MS", "8000"))
    BASE_CURRENCY: str = os.getenv("BASE_CURRENCY", "INR")

    # Extra browser origins on top of the local React dev server (comma-separated)
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

# Singleton-style settings object imported elsewhere (avoid re-parsing env repeatedly)
settings = Settings()

def get_settings() -> Settings:
    # FastAPI dependency; tests swap it via app.dependency_overrides
    return settings
