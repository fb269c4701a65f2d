"""
Application configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _split_origins(value: str) -> list[str]:
    return [o.strip() for o in value.split(",") if o.strip()]


class Settings:
    """Settings from environment variables"""

    # Database
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "crease.db")

    # JWT settings for scorer tokens
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "480"))  # one match day

    # Extra CORS origins (comma-separated)
    CORS_ORIGINS: list[str] = _split_origins(os.getenv("CORS_ORIGINS", ""))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Used when a match is created without an explicit overs limit
    DEFAULT_OVERS_LIMIT: int = int(os.getenv("DEFAULT_OVERS_LIMIT", "20"))


settings = Settings()
