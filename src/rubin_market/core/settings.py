"""Application settings and configuration.

This module defines all configuration options for the Rubin Market service.
Settings are loaded from environment variables with sensible defaults. The
encryption secrets and the JWT verification key have no defaults: the process
refuses to start without them.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Rubin Market", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Caller identity is asserted by the external auth provider via bearer JWTs
    secret_key: str = Field(alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")

    # Chat encryption key material (server-held, derived once per process)
    encryption_secret: str = Field(alias="ENCRYPTION_SECRET")
    encryption_salt: str = Field(alias="ENCRYPTION_SALT")

    # Database configuration
    database_url: str = Field(default="sqlite:///./rubin_market.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Chat and moderation behaviour
    chat_snapshot_size: int = Field(default=50, alias="CHAT_SNAPSHOT_SIZE")
    snapshot_visible_after_resolution: bool = Field(
        default=False,
        alias="SNAPSHOT_VISIBLE_AFTER_RESOLUTION",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url


settings = Settings()  # type: ignore[call-arg]
