"""
Configuration
=============

Application settings read from the environment and an optional ``.env`` file.
"""

from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings, each overridable through ``QUERYWISE_<NAME>``.

    With neither ``database_url`` nor ``db_host`` set, the service runs on
    the in-memory sample catalog.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="QUERYWISE_", extra="ignore")

    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = ""

    # Database
    database_url: str = ""
    db_driver: str = "postgresql+asyncpg"
    db_host: str = ""
    db_port: Optional[int] = None
    db_name: str = ""
    db_user: str = ""
    db_password: str = ""
    pool_size: int = 10
    queue_limit: int = 0
    pool_timeout: float = 30.0

    # Queries
    default_row_limit: int = 100

    # Reasoning capability
    gemini_api_key: str = ""
    gemini_model: str = "gemini-flash-latest"

    # Tracing
    otlp_endpoint: str = "disabled"

    @property
    def uses_database(self) -> bool:
        return bool(self.database_url or self.db_host)

    @property
    def json_logs(self) -> bool:
        return self.log_format.lower() == "json" or self.environment == "production"

    def resolved_database_url(self) -> str:
        """Return ``database_url``, or build one from the host settings."""
        if self.database_url:
            return self.database_url
        if not self.db_name:
            raise ValueError("Database name is required (QUERYWISE_DB_NAME)")

        host = self.db_host or "localhost"
        if self.db_port:
            host = f"{host}:{self.db_port}"
        credentials = quote_plus(self.db_user) if self.db_user else ""
        if credentials and self.db_password:
            credentials += f":{quote_plus(self.db_password)}"
        if credentials:
            credentials += "@"
        return f"{self.db_driver}://{credentials}{host}/{self.db_name}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
