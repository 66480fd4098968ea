"""
Configuration management for HRMS leave service
"""
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    DATABASE_URL: str = Field(default="sqlite:///./hrms.db", description="SQLAlchemy database URL")
    JWT_SECRET_KEY: str = Field(default="local-dev-secret-change-me", description="JWT secret key for token verification")

    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")

    APP_ENV: str = Field(default="local", description="Application environment: local, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR")

    # CORS settings
    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Use '*' for local only."
    )

    VERSION: Optional[str] = Field(default=None, description="Application version (git SHA or semver)")

    # Leave policy defaults (days per calendar year). Unpaid leave is unbounded.
    ANNUAL_LEAVE_DAYS: int = Field(default=20, ge=0, description="Annual leave entitlement")
    CASUAL_LEAVE_DAYS: int = Field(default=12, ge=0, description="Casual/personal leave entitlement")
    SICK_LEAVE_DAYS: int = Field(default=10, ge=0, description="Sick leave entitlement")
    MATERNITY_LEAVE_DAYS: int = Field(default=180, ge=0, description="Maternity leave entitlement")
    PATERNITY_LEAVE_DAYS: int = Field(default=7, ge=0, description="Paternity leave entitlement")

    # Client synchronization layer
    API_BASE_URL: str = Field(
        default="http://localhost:8000/api/v1",
        description="Base URL of the HRMS API used by the client ledger"
    )
    API_TIMEOUT_SECONDS: float = Field(
        default=15.0,
        gt=0,
        description="Timeout for a single API round-trip before it counts as a transport failure"
    )
    LOCAL_MIRROR_DIR: str = Field(
        default=".hrms_mirror",
        description="Directory holding the local mirror slots (one JSON file per collection)"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate APP_ENV"""
        allowed = ["local", "staging", "prod"]
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate LOG_LEVEL"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    def validate_production(self) -> None:
        """
        Validate settings for production environment

        Raises:
            ValueError: If production settings are invalid
        """
        if self.APP_ENV == "prod":
            if len(self.JWT_SECRET_KEY) < 32:
                raise ValueError(
                    "JWT_SECRET_KEY must be at least 32 characters in production environment"
                )

            if self.ALLOWED_ORIGINS == "*" or not self.ALLOWED_ORIGINS:
                raise ValueError(
                    "ALLOWED_ORIGINS must be explicitly set (not '*') in production environment"
                )

    def get_allowed_origins_list(self) -> List[str]:
        """
        Get list of allowed CORS origins

        Returns:
            List of allowed origins (or ['*'] for local)
        """
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Create settings instance
settings = Settings()

# Validate production settings if in prod
if settings.APP_ENV == "prod":
    settings.validate_production()
