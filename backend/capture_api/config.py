"""
Application configuration
"""

import os
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_CORS_ORIGINS = (
    "http://127.0.0.1:5500,http://localhost:5500,"
    "http://localhost:5173,http://127.0.0.1:5173"
)


class Settings:
    """Application settings, read once from the environment"""

    def __init__(self, env_file: Optional[str] = None):
        load_dotenv(env_file or os.getenv("ENV_FILE", ".env"))

        self.DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "8080"))
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if self.DEBUG else "INFO").upper()

        cors_origins_str = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
        self.CORS_ORIGINS: List[str] = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]

        # Capture settings
        self.CONCURRENCY: int = int(os.getenv("CONCURRENCY", "3"))
        self.DEFAULT_TIMEOUT_SECONDS: int = int(os.getenv("DEFAULT_TIMEOUT_SECONDS", "60"))

        # Shared secret; empty means every request is allowed
        self.SECRET: Optional[str] = os.getenv("SECRET") or None

        # Debug pages for the latest capture
        self.SHOW_RESULTS: bool = os.getenv("SHOW_RESULTS", "false").lower() == "true"
