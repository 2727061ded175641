"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (storage backend, DB URI, data file, CORS)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import List, Optional, Literal


DEFAULT_FRONTEND_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Storage
    STORAGE_BACKEND: Literal["mongo", "file"] = Field(
        default="mongo",
        description="Which store keeps user records: MongoDB or a JSON file"
    )
    STORAGE_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Upper bound for every storage call, in seconds"
    )

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="user_directory",
        description="MongoDB database name"
    )
    MONGODB_COLLECTION: str = Field(
        default="users",
        description="Collection holding user records"
    )

    # Flat file
    DATA_FILE: str = Field(
        default="data/users.json",
        description="Path of the JSON file used by the file backend"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    HOST: str = Field(
        default="0.0.0.0",
        description="Interface uvicorn binds to"
    )
    PORT: int = Field(
        default=8000,
        description="Port uvicorn listens on"
    )
    FRONTEND_ORIGIN: Optional[str] = Field(
        default=None,
        description="Deployed frontend origin allowed by CORS"
    )
    CORS_ORIGINS: List[str] = Field(
        default=[],
        description="Extra allowed CORS origins"
    )

    @validator("STORAGE_TIMEOUT_SECONDS")
    def validate_storage_timeout(cls, v):
        """Storage calls must always be bounded."""
        if v <= 0:
            raise ValueError("STORAGE_TIMEOUT_SECONDS must be positive")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def allowed_origins(self) -> List[str]:
        """Origins the CORS middleware lets through, without duplicates."""
        origins = []
        candidates = [self.FRONTEND_ORIGIN, *DEFAULT_FRONTEND_ORIGINS, *self.CORS_ORIGINS]
        for origin in candidates:
            if origin and origin not in origins:
                origins.append(origin)
        return origins

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings(config: Optional[Settings] = None):
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    config = config or settings
    errors = []

    if config.STORAGE_BACKEND == "mongo":
        if not config.MONGODB_URL:
            errors.append("MONGODB_URL is required for the mongo backend")
        if not config.MONGODB_DB_NAME:
            errors.append("MONGODB_DB_NAME is required for the mongo backend")
        if not config.MONGODB_COLLECTION:
            errors.append("MONGODB_COLLECTION is required for the mongo backend")

    if config.STORAGE_BACKEND == "file" and not config.DATA_FILE:
        errors.append("DATA_FILE is required for the file backend")

    # Production-specific validations
    if config.is_production and not config.FRONTEND_ORIGIN:
        errors.append("FRONTEND_ORIGIN is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
