# 📄 File: adoptd/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings from environment variables
# and hands them to the rest of the plant doctor in an organized way.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for all application configuration parameters.
# Missing required secrets (Supabase, Gemini) make startup fail fast.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - typing for type hints
#
# 🔄 Connected Modules / Calls From:
# - adoptd.main (application startup)
# - Supabase client manager, Gemini client, weather client
# - State services (quotas, reminder polling, notification lifetime)

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

    APP_NAME: str = Field(default="ADOPTD Plant Doctor API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_DESCRIPTION: str = Field(
        default="Automatic Diagnosis Of Plants and Tree Diseases",
        description="Application description"
    )
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=True, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format: json or text")

    # =========================================================================
    # SERVER CONFIGURATION
    # =========================================================================

    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    RELOAD: bool = Field(default=False, description="Auto-reload on changes")

    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="CORS allowed origins"
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True, description="CORS allow credentials")

    # Where unauthenticated clients are sent
    AUTH_REDIRECT_PATH: str = Field(default="/login", description="Unauthenticated entry point")
    AUTH_CALLBACK_URL: Optional[str] = Field(None, description="Email confirmation redirect URL")

    # =========================================================================
    # SUPABASE
    # =========================================================================

    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_ANON_KEY: str = Field(..., description="Supabase anonymous key")

    FORUM_PHOTOS_BUCKET: str = Field(default="forum-photos", description="Forum photo bucket")
    AVATARS_BUCKET: str = Field(default="avatars", description="Profile avatar bucket")
    MAX_IMAGE_SIZE: int = Field(default=5242880, description="Max image size (5MB)")
    IMAGE_QUALITY: int = Field(default=85, description="Image compression quality")
    IMAGE_MAX_DIMENSION: int = Field(default=1920, description="Max image width/height in pixels")

    # =========================================================================
    # AI / LLM
    # =========================================================================

    GEMINI_API_KEY: str = Field(..., description="Google Gemini API key")
    GEMINI_MODEL: str = Field(default="gemini-2.0-flash", description="Gemini model")
    GEMINI_CHAT_TEMPERATURE: float = Field(default=0.4, description="Chat sampling temperature")
    GEMINI_CHAT_MAX_TOKENS: int = Field(default=12000, description="Chat max output tokens")

    # =========================================================================
    # WEATHER
    # =========================================================================

    WEATHER_API_KEY: Optional[str] = Field(None, description="WeatherAPI.com key")
    WEATHER_API_URL: str = Field(
        default="https://api.weatherapi.com/v1",
        description="WeatherAPI.com base URL"
    )
    WEATHER_FORECAST_DAYS: int = Field(default=3, description="Premium forecast length")
    WEATHER_LANGUAGE: str = Field(default="ru", description="Weather condition language")
    WEATHER_TIMEOUT: int = Field(default=15, description="Weather request timeout (seconds)")

    # =========================================================================
    # ENTITLEMENTS
    # =========================================================================

    FREE_DAILY_SCANS: int = Field(default=7, description="Free tier scans per day")
    FREE_DAILY_CHAT_MESSAGES: int = Field(default=10, description="Free tier chat messages per day")
    PREMIUM_TIER_ID: int = Field(default=1, description="subscription_tier_id meaning premium")

    # =========================================================================
    # REMINDERS & NOTIFICATIONS
    # =========================================================================

    REMINDER_POLL_INTERVAL: float = Field(default=30.0, description="Due-time scan cadence (seconds)")
    REMINDER_DUE_TOLERANCE: float = Field(default=60.0, description="Due-time window half-width (seconds)")
    NOTIFICATION_TAG_TTL: float = Field(default=300.0, description="Lifetime of a tagged notification (seconds)")

    # =========================================================================
    # GAMIFICATION
    # =========================================================================

    ADMIN_ONLY_TITLES: str = Field(
        default="Толстый Алхимик,Токаев",
        description="Titles granted by administrators only"
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

    @field_validator("GEMINI_API_KEY")
    @classmethod
    def validate_gemini_key(cls, v: str) -> str:
        """The generative endpoint cannot work without a key."""
        if not v.strip():
            raise ValueError("GEMINI_API_KEY must not be empty")
        return v.strip()

    @field_validator("CORS_ORIGINS")
    @classmethod
    def validate_cors_origins(cls, v: str) -> str:
        """Validate CORS origins format."""
        origins = [origin.strip() for origin in v.split(",")]
        for origin in origins:
            if not origin.startswith(("http://", "https://", "*")):
                raise ValueError(f"Invalid CORS origin format: {origin}")
        return v

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def admin_only_titles(self) -> List[str]:
        return [name.strip() for name in self.ADMIN_ONLY_TITLES.split(",") if name.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == "development"

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
