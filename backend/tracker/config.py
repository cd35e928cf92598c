from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

# frontend/ sits next to backend/ in the repository
DEFAULT_FRONTEND_DIR = Path(__file__).resolve().parent.parent.parent / "frontend"


class Settings(BaseSettings):
    """Application settings"""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Database
    DATABASE_URL: str = "sqlite:///./clicks.db"

    # Admin panel (no fallback credentials)
    ADMIN_USER: str = Field(..., min_length=1)
    ADMIN_PASS: str = Field(..., min_length=1)

    # Tracking
    REDIRECT_URL: str = "https://www.instagram.com/"
    TRUST_PROXY: bool = True  # Read client IP from X-Forwarded-For

    # Geolocation
    GEO_API_URL: str = "http://ip-api.com/json"
    GEO_TIMEOUT: float = 3.0  # seconds

    # Backups
    BACKUP_DIR: str = "./backups"
    BACKUP_INTERVAL_HOURS: float = 24

    # Static files
    FRONTEND_DIR: Path = DEFAULT_FRONTEND_DIR

    # Rate Limiting
    RATE_LIMIT: str = "100/15minutes"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
