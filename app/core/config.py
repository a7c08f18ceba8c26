
from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables / .env file."""

    app_name: str = "ArmoredMart Admin API"
    app_env: str = "development"
    app_port: int = 8000
    frontend_url: str = "http://localhost:3000"

    # Database (PostgreSQL via asyncpg in deployed envs, SQLite for local dev)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./armoredmart_dev.db",
        alias="DATABASE_URL",
    )
    db_auto_create: bool = Field(
        default=True, alias="DB_AUTO_CREATE",
    )  # create missing tables on startup

    # Multi-tenancy default
    default_client_id: str = Field(default="default", alias="DEFAULT_CLIENT_ID")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
    }

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

settings = Settings()
