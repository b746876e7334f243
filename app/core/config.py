"""
Core configuration for CodeZetta Backend
Quiz platform for web developers
"""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings"""

    # Application Settings
    APP_NAME: str = "CodeZetta"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "CodeZetta quiz platform backend"
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "CodeZetta Backend"

    # Security
    SECRET_KEY: str = Field(default="changeme")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    ALGORITHM: str = "HS256"
    BCRYPT_ROUNDS: int = 10
    PASSWORD_MIN_LENGTH: int = 6

    # Database
    DATABASE_URL: Optional[str] = Field(default=None)

    # OAuth providers
    GOOGLE_CLIENT_ID: Optional[str] = Field(default=None)
    GOOGLE_CLIENT_SECRET: Optional[str] = Field(default=None)
    GOOGLE_CALLBACK_URL: str = Field(
        default="http://localhost:3000/api/v1/auth/google/callback"
    )
    LINKEDIN_CLIENT_ID: Optional[str] = Field(default=None)
    LINKEDIN_CLIENT_SECRET: Optional[str] = Field(default=None)
    LINKEDIN_CALLBACK_URL: str = Field(
        default="http://localhost:3000/api/v1/auth/linkedin/callback"
    )
    OAUTH_TIMEOUT_SECONDS: float = Field(default=10.0)

    # Account linking: attach a social identity to an existing user with the same email
    SOCIAL_LINK_BY_EMAIL: bool = Field(default=True)

    # Frontend
    FRONTEND_BASE_URL: str = Field(default="http://localhost:8888")
    FRONTEND_SUCCESS_REDIRECT: str = Field(
        default="http://localhost:8888/auth/social/callback"
    )
    FRONTEND_FAILURE_REDIRECT: str = Field(default="http://localhost:8888/auth/login")

    # Redis Cache
    REDIS_URL: Optional[str] = Field(default=None)
    CACHE_TTL: int = Field(default=300)  # 5 minutes
    LEADERBOARD_CACHE_TTL: int = Field(default=60)

    # CORS
    BACKEND_CORS_ORIGINS: str = Field(
        default="http://localhost:8888,http://localhost:4200"
    )

    # Sentry
    SENTRY_DSN: Optional[str] = Field(default=None)

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = Field(default=True)
    RATE_LIMIT_REQUESTS: int = Field(default=100)
    RATE_LIMIT_PERIOD: int = Field(default=60)  # seconds

    SECURITY_HEADERS_ENABLED: bool = Field(default=True)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    LOG_FILE: Optional[str] = Field(default=None)
    LOG_MAX_BYTES: int = Field(default=10 * 1024 * 1024)
    LOG_BACKUP_COUNT: int = Field(default=5)

    # Quiz sessions
    SESSION_CLEANUP_ENABLED: bool = Field(default=True)
    SESSION_CLEANUP_INTERVAL_SECONDS: int = Field(default=120)
    SESSION_INACTIVE_TIMEOUT_SECONDS: int = Field(default=120)

    class Config:
        env_file = ".env"
        case_sensitive = True

    def get_database_url(self) -> str:
        """Get database URL with proper formatting"""
        if self.DATABASE_URL:
            # Handle Render's postgres:// URLs
            db_url = self.DATABASE_URL
            if db_url.startswith("postgres://"):
                db_url = db_url.replace("postgres://", "postgresql://", 1)
            return db_url

        # Default for development
        return "sqlite:///./codezetta.db"

    def get_cors_origins(self) -> list[str]:
        """Get CORS origins as list"""
        if self.BACKEND_CORS_ORIGINS:
            return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",")]
        return [self.FRONTEND_BASE_URL]

    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
