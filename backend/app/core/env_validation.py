"""
Runtime Environment Validation Module

This module validates all required environment variables at application startup.
If validation fails, the application will refuse to start (hard fail).

This prevents runtime errors from missing or misconfigured environment variables.
"""

import sys

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_DATABASE_SCHEMES = ("postgresql", "sqlite")


class ProductionSettings(BaseSettings):
    """
    Strict validation schema for environment variables.

    All required fields MUST be present and valid, or the application will not start.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # CRITICAL: Database Configuration
    # ========================================================================
    database_url: str  # REQUIRED: postgresql+asyncpg://... (sqlite+aiosqlite for local runs)
    db_pool_size: int = 5
    db_max_overflow: int = 0
    db_pool_timeout: int = 30

    # ========================================================================
    # Application Configuration
    # ========================================================================
    app_name: str = "License Manager"
    debug: bool = False
    api_v1_prefix: str = "/api"
    log_level: str = "INFO"

    # ========================================================================
    # CORS Configuration
    # ========================================================================
    allowed_origins: str = "http://localhost:3000"


def validate_environment() -> ProductionSettings:
    """
    Validate all required environment variables at startup.

    This function MUST be called before the FastAPI app starts.
    If validation fails, the application will exit with code 1.

    Returns:
        ProductionSettings: Validated settings object

    Raises:
        SystemExit: If validation fails (exit code 1)
    """

    try:
        settings = ProductionSettings()
    except ValidationError as e:
        print("❌ FATAL: Environment validation failed", file=sys.stderr)
        print("\nMissing or invalid environment variables:", file=sys.stderr)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            msg = error["msg"]
            print(f"   • {field}: {msg}", file=sys.stderr)

        print("\nThe application cannot start with invalid configuration.", file=sys.stderr)
        print("Please check your .env file or environment variables.", file=sys.stderr)
        sys.exit(1)

    # 1. CORS: Ensure wildcard is not used outside debug mode
    if not settings.debug:
        origins = [o.strip() for o in settings.allowed_origins.split(",")]
        if "*" in origins:
            print(
                "❌ FATAL: Wildcard CORS origin (*) detected in production mode.",
                file=sys.stderr
            )
            print(
                "   Set ALLOWED_ORIGINS to specific domains (comma-separated).",
                file=sys.stderr
            )
            sys.exit(1)

    # 2. Database URL: Basic format validation
    if not settings.database_url.startswith(SUPPORTED_DATABASE_SCHEMES):
        print(
            "❌ FATAL: DATABASE_URL must be a PostgreSQL (postgresql+asyncpg://) "
            "or SQLite (sqlite+aiosqlite://) connection string",
            file=sys.stderr
        )
        sys.exit(1)

    # 3. Pool sizing
    if settings.db_pool_size < 1 or settings.db_pool_timeout < 1:
        print(
            "❌ FATAL: DB_POOL_SIZE and DB_POOL_TIMEOUT must be positive",
            file=sys.stderr
        )
        sys.exit(1)

    print("✅ Environment validation passed")
    print(f"   App: {settings.app_name}")
    print(f"   Debug: {settings.debug}")
    print(f"   CORS Origins: {settings.allowed_origins}")

    return settings


if __name__ == "__main__":
    # Allow running this module directly to test validation
    validate_environment()
    print("\n✅ All environment variables are valid!")
