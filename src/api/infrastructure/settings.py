"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        PORTAL_DB_HOST: Database host (default: localhost)
        PORTAL_DB_PORT: Database port (default: 5432)
        PORTAL_DB_DATABASE: Database name (default: portal)
        PORTAL_DB_USERNAME: Database user (default: portal)
        PORTAL_DB_PASSWORD: Database password (required in production)
        PORTAL_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        PORTAL_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTAL_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="portal", description="Database name")
    username: str = Field(default="portal", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class OIDCSettings(BaseSettings):
    """Identity provider settings.

    Environment variables:
        PORTAL_OIDC_ISSUER_URL: OIDC issuer URL used for JWKS discovery
        PORTAL_OIDC_AUDIENCE: Expected token audience (defaults to client_id)
        PORTAL_OIDC_CLIENT_ID: OAuth client ID
        PORTAL_OIDC_CLIENT_SECRET: OAuth client secret (admin API access)
        PORTAL_OIDC_ADMIN_API_URL: Base URL of the provider's user admin API
        PORTAL_OIDC_ROLE_CLAIM: Claim carrying the coarse role (default: role)
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTAL_OIDC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    issuer_url: str = Field(
        default="http://localhost:8080/realms/portal",
        description="OIDC issuer URL",
    )
    audience: str | None = Field(default=None, description="Expected audience")
    client_id: str = Field(default="portal", description="OAuth client ID")
    client_secret: SecretStr = Field(
        default=SecretStr(""),
        description="OAuth client secret",
    )
    admin_api_url: str = Field(
        default="http://localhost:8080/admin/realms/portal",
        description="Identity provider user admin API base URL",
    )
    user_id_claim: str = Field(default="sub", description="Claim for user ID")
    email_claim: str = Field(default="email", description="Claim for email")
    name_claim: str = Field(default="name", description="Claim for display name")
    role_claim: str = Field(default="role", description="Claim for role")

    @property
    def effective_audience(self) -> str:
        """Audience to validate against, falling back to the client ID."""
        return self.audience or self.client_id


class SessionSettings(BaseSettings):
    """Signed cookie settings for per-browser state.

    Environment variables:
        PORTAL_SESSION_SECRET_KEY: Key used to sign cookies (required; cookie
            state is refused while unset)
        PORTAL_SESSION_SECURE_COOKIES: Mark cookies Secure (default: true)
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTAL_SESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    secret_key: SecretStr = Field(
        default=SecretStr(""),
        description="Cookie signing key",
    )
    secure_cookies: bool = Field(default=True, description="Secure cookie flag")
    active_tenant_cookie: str = Field(default="portal_active_tenant")
    active_tenant_max_age_seconds: int = Field(
        default=60 * 60 * 24 * 30,
        description="Lifetime of the active-tenant preference",
        ge=60,
    )
    impersonation_cookie: str = Field(default="portal_impersonation")
    impersonation_active_tenant_cookie: str = Field(
        default="portal_impersonation_active_tenant"
    )
    impersonation_max_age_seconds: int = Field(
        default=60 * 60 * 4,
        description="Maximum age of an impersonation marker",
        ge=60,
    )

    @property
    def signing_configured(self) -> bool:
        """Whether a signing key is set."""
        return bool(self.secret_key.get_secret_value())


class WebhookSettings(BaseSettings):
    """Inbound webhook settings (PORTAL_WEBHOOK_ prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="PORTAL_WEBHOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    identity_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Shared secret for identity provider webhooks",
    )


class CronSettings(BaseSettings):
    """Scheduled job settings (PORTAL_CRON_ prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="PORTAL_CRON_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    secret: SecretStr = Field(
        default=SecretStr(""),
        description="Bearer secret required by cron endpoints",
    )
    probe_timeout_seconds: float = Field(default=10.0, gt=0)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Client Portal API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache
def get_oidc_settings() -> OIDCSettings:
    """Get cached identity provider settings."""
    return OIDCSettings()


@lru_cache
def get_session_settings() -> SessionSettings:
    """Get cached cookie/session settings."""
    return SessionSettings()


@lru_cache
def get_webhook_settings() -> WebhookSettings:
    """Get cached webhook settings."""
    return WebhookSettings()


@lru_cache
def get_cron_settings() -> CronSettings:
    """Get cached cron settings."""
    return CronSettings()
