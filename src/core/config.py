"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Local Gigs Users API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/localgigs",
        description="PostgreSQL connection URL with asyncpg driver",
    )
    users_table_name: str = Field(
        default="localgigs",
        description="Name of the key-value table holding user profile records",
    )

    # Identity provider (Cognito user pool)
    cognito_region: str = Field(default="us-east-1")
    cognito_user_pool_id: str = Field(
        default="",
        description="Cognito user pool id (e.g. us-east-1_AbCdEf123)",
    )
    cognito_client_id: str = Field(
        default="",
        description="App client id; checked against the token audience when set",
    )

    # JWT Authentication
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Secret key for JWT signing (used for HS256 fallback and tests)",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=60)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cognito_jwks_url(self) -> str:
        """JWKS endpoint for RS256 token verification."""
        if self.cognito_user_pool_id:
            return (
                f"https://cognito-idp.{self.cognito_region}.amazonaws.com/"
                f"{self.cognito_user_pool_id}/.well-known/jwks.json"
            )
        return ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Hosting providers supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS (every response carries these headers)
    cors_allow_origin: str = Field(default="*")
    cors_allow_headers: str = Field(default="Content-Type,Authorization")
    cors_allow_methods: str = Field(default="GET,POST,PUT,DELETE,OPTIONS")

    # Profile client
    api_base_url: str = Field(
        default="http://localhost:8000/api/v1",
        description="Base URL the profile client talks to",
    )
    client_timeout_seconds: float = Field(
        default=10.0,
        description="Per round-trip timeout applied by the profile client",
    )
    profile_cache_dir: str = Field(
        default=".localgigs-cache",
        description="Directory for the file-backed profile cache mirror",
    )
    upload_max_bytes: int = Field(default=5 * 1024 * 1024)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_headers(self) -> dict[str, str]:
        """Headers stamped on every HTTP response."""
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Headers": self.cors_allow_headers,
            "Access-Control-Allow-Methods": self.cors_allow_methods,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
