from typing import Any, Dict, Literal, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    """
    CLI settings with environment variable support.

    All settings can be configured via .env file or environment variables.
    The connection variables follow libpq naming (PGHOST, PGUSER, ...).
    """

    # =============================================================================
    # POSTGRESQL DATABASE - Individual components
    # =============================================================================
    PGHOST: str = "localhost"
    PGPORT: int = 5432
    PGUSER: str = "postgres"
    PGPASSWORD: str = ""
    PGDATABASE: str = "postgres"

    # Full connection string, takes precedence over the components above
    DATABASE_URL: Optional[str] = None

    # TLS without certificate verification (managed cloud databases)
    PGSSL: bool = False

    # =============================================================================
    # DATABASE POOL SETTINGS
    # =============================================================================
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_CONNECT_TIMEOUT: int = 10
    DB_ECHO_SQL: bool = False

    # =============================================================================
    # LOGGING
    # =============================================================================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        """Accept level names in any case, e.g. LOG_LEVEL=debug."""
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def normalize_database_url(cls, v: Optional[str]) -> Optional[str]:
        """
        Treat an empty DATABASE_URL as unset and rewrite the legacy
        ``postgres://`` scheme, which SQLAlchemy no longer accepts.
        """
        if not isinstance(v, str):
            return v
        v = v.strip()
        if not v:
            return None
        if v.startswith("postgres://"):
            return "postgresql://" + v[len("postgres://"):]
        return v

    def get_database_url(self) -> URL:
        """
        Get the SQLAlchemy URL.

        Priority:
        1. Use DATABASE_URL if explicitly set
        2. Build from PG* components
        """
        if self.DATABASE_URL:
            return make_url(self.DATABASE_URL)

        return URL.create(
            "postgresql+psycopg2",
            username=self.PGUSER,
            password=self.PGPASSWORD or None,
            host=self.PGHOST,
            port=self.PGPORT,
            database=self.PGDATABASE,
        )

    def get_connect_args(self) -> Dict[str, Any]:
        """Driver connect arguments; only PostgreSQL URLs get libpq options."""
        if self.get_database_url().get_backend_name() != "postgresql":
            return {}

        connect_args: Dict[str, Any] = {"connect_timeout": self.DB_CONNECT_TIMEOUT}
        if self.PGSSL:
            connect_args["sslmode"] = "require"
        return connect_args

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow"
    )


def get_settings() -> Settings:
    return Settings()
