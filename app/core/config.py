from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings with type-safe configuration management."""

    # Database Configuration
    DATABASE_URL: str = "postgresql+asyncpg://postgres:postgres@db:5432/eventportal"

    # Redis Configuration (token revocation list)
    REDIS_URL: str = "redis://redis:6379/0"

    # Security Configuration
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    ALGORITHM: str = "HS256"

    # Lockout Configuration
    MAX_FAILED_ACCESS_ATTEMPTS: int = 5
    LOCKOUT_MINUTES: int = 5

    # Default administrator seeded at startup
    ADMIN_EMAIL: str = "admin@eventportal.com"
    ADMIN_PASSWORD: str = "Admin@123"
    ADMIN_FULL_NAME: str = "System Administrator"

    # CORS Configuration
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8000"

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True

    # Environment
    ENVIRONMENT: str = "development"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def allowed_origins_list(self) -> List[str]:
        """Convert comma-separated ALLOWED_ORIGINS string to list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


# Create a single instance to be imported throughout the app
settings = Settings()
