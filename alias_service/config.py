import string

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = False

    # Application
    app_name: str = "Alias Service"
    app_version: str = "1.0.0"

    # Database
    database_url: str = "sqlite:///./alias_service.db"

    # Public addresses
    base_url: str = "http://127.0.0.1:8000"
    fallback_url: str = "http://127.0.0.1:3000"  # Where unknown aliases are sent

    # Alias generation
    alias_length: int = 6
    alias_alphabet: str = string.ascii_letters + string.digits
    alias_strategy: str = "random"  # Options: "random", "secure"
    alias_max_retries: int = 10

    # Rate limiting (per alias, compared against hit_count)
    rate_limit_threshold: int = 10

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # Options: "console", "json"

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
