# 📄 File: freeexperience/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings from environment variables
# and hands them to the rest of the marketplace in an organized way.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for all application configuration parameters.
# The Supabase credentials double as the process-wide backend availability check.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - python-dotenv (via pydantic-settings) for .env file loading
#
# 🔄 Connected Modules / Calls From:
# - freeexperience.main (application startup)
# - freeexperience.context (backend selection, cache TTLs)
# - Supabase manager and local durable store

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="FreeExperience API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_DESCRIPTION: str = Field(
        default="Marketplace for early-career specialists and experience projects",
        description="Application description"
    )
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=True, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format: json or text")
    LOG_FILE: Optional[str] = Field(None, description="Optional log file path")

    # =========================================================================
    # SERVER CONFIGURATION
    # =========================================================================

    HOST: str = Field(default="127.0.0.1", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    RELOAD: bool = Field(default=False, description="Auto-reload on changes")

    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="CORS allowed origins"
    )

    # =========================================================================
    # SUPABASE (REMOTE BACKEND)
    # =========================================================================

    SUPABASE_URL: Optional[str] = Field(None, description="Supabase project URL")
    SUPABASE_ANON_KEY: Optional[str] = Field(None, description="Supabase anonymous key")
    SUPABASE_STORAGE_BUCKET: str = Field(
        default="public-assets",
        description="Supabase storage bucket for public assets"
    )
    SUPABASE_STORAGE_CACHE_CONTROL: str = Field(
        default="3600",
        description="Cache-Control max-age for uploaded assets"
    )

    # =========================================================================
    # LOCAL DURABLE STORE (FALLBACK BACKEND)
    # =========================================================================

    LOCAL_STORE_PATH: Optional[str] = Field(
        default="data/local_store.json",
        description="File backing the local key-value store (None keeps it in memory)"
    )
    LOCAL_STORE_QUOTA_BYTES: int = Field(
        default=5 * 1024 * 1024,
        description="Capacity ceiling of the local key-value store"
    )

    # =========================================================================
    # CACHE SETTINGS (seconds)
    # =========================================================================

    CACHE_DEFAULT_TTL: float = Field(default=30.0, description="Default cache TTL")
    CACHE_AUTH_TTL: float = Field(default=5.0, description="Session/identity cache TTL")
    CACHE_SPECIALISTS_TTL: float = Field(default=60.0, description="Specialist cache TTL")
    CACHE_PROJECTS_TTL: float = Field(default=30.0, description="Project cache TTL")
    CACHE_ARTICLES_TTL: float = Field(default=60.0, description="Article cache TTL")
    CACHE_REQUEST_TIMEOUT: Optional[float] = Field(
        default=10.0,
        description="Upper bound for a single cached fetch (None disables)"
    )

    # =========================================================================
    # SESSION RESOLUTION
    # =========================================================================

    SESSION_FOCUS_REFRESH_INTERVAL: float = Field(
        default=1.0,
        description="Minimum seconds between opportunistic focus refreshes"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed_environments = ["development", "staging", "production", "test"]
        if v.lower() not in allowed_environments:
            raise ValueError(f"Environment must be one of {allowed_environments}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format value."""
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()

    @field_validator("CORS_ORIGINS")
    @classmethod
    def validate_cors_origins(cls, v: str) -> str:
        """Validate CORS origins format."""
        origins = [origin.strip() for origin in v.split(",")]
        for origin in origins:
            if not origin.startswith(("http://", "https://", "*")):
                raise ValueError(f"Invalid CORS origin format: {origin}")
        return v

    @field_validator(
        "CACHE_DEFAULT_TTL", "CACHE_AUTH_TTL", "CACHE_SPECIALISTS_TTL", "CACHE_PROJECTS_TTL", "CACHE_ARTICLES_TTL"
    )
    @classmethod
    def validate_ttl(cls, v: float) -> float:
        """Cache TTLs must be positive."""
        if v <= 0:
            raise ValueError("Cache TTL must be positive")
        return v

    @field_validator("SESSION_FOCUS_REFRESH_INTERVAL")
    @classmethod
    def validate_focus_interval(cls, v: float) -> float:
        """Focus refresh throttling must be at least one second."""
        if v < 1.0:
            raise ValueError("Focus refresh interval must be at least 1 second")
        return v

    @field_validator("LOCAL_STORE_QUOTA_BYTES")
    @classmethod
    def validate_quota(cls, v: int) -> int:
        """Validate local store capacity."""
        if v <= 0:
            raise ValueError("Local store quota must be positive")
        return v

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def supabase_configured(self) -> bool:
        """Static availability check for the remote backend."""
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.ENVIRONMENT == "test"


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
