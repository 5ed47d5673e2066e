# fintrack/core/config.py

import json
from pathlib import Path
from typing import Dict
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )

    # App Configuration
    APP_NAME: str = "Fintrack API"
    DEBUG: bool = False
    VERSION: str = "1.0.0"

    # Database Configuration
    DATABASE_URL: str = "sqlite+aiosqlite:///./fintrack.db"

    # JWT / Security Configuration
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080

    # CORS Configuration
    FRONTEND_URL: str = "http://localhost:3000"

    # Aggregation Configuration
    KIND_SCHEME: str = "unified"          # v1, v2 or unified
    KIND_OVERRIDES: Dict[str, str] = {}   # raw kind -> category name
    METRICS_FORMULA: str = "combined"     # ledger, fixed or combined
    DEFAULT_PERIOD: str = "month"
    MAX_CHART_DAYS: int = 1096         # longest day window a chart will render

    # Optional: Environment
    ENVIRONMENT: str = "development"

    @field_validator("KIND_OVERRIDES", mode="before")
    @classmethod
    def parse_overrides(cls, value):
        # Allow an empty string in .env files
        if isinstance(value, str):
            return json.loads(value) if value.strip() else {}
        return value

    @property
    def is_sqlite(self) -> bool:
        """Check if we're running against SQLite (tests, local dev)"""
        return self.DATABASE_URL.startswith("sqlite")

# Create a global settings instance
settings = Settings()
