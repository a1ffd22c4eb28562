"""
Application settings.

Values come from the environment (or a local .env file).
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings

from carefit.domain.metrics import DEFAULT_LATEST_LIMIT


class Settings(BaseSettings):
    """Runtime configuration."""

    # Low-privilege connection, subject to row-level access policy
    database_url: str = "sqlite:///./carefit.db"
    # Elevated connection that bypasses row-level policy; preferred when set
    database_service_url: Optional[str] = None
    database_echo: bool = False

    # Create tables on start-up (development); production runs alembic
    create_tables: bool = True

    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8000

    # Stand-in for real authentication
    operator_id: str = "1"

    latest_measurements_limit: int = DEFAULT_LATEST_LIMIT

    class Config:
        env_file = ".env"

    @property
    def uses_service_credential(self) -> bool:
        return bool(self.database_service_url)

    @property
    def effective_database_url(self) -> str:
        """Connection URL chosen once at start-up."""
        if self.database_service_url:
            return self.database_service_url
        return self.database_url


@lru_cache
def get_settings() -> Settings:
    return Settings()
