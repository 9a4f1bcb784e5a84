"""Configuration management using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_path: str = "./data/dubium.db"
    # Browser origins allowed to send credentialed requests
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8081"]

    # JWT Configuration
    jwt_secret_key: str = "change-me-in-production-use-env-var"
    jwt_issuer: str = "dubium-api"
    jwt_audience: str = "dubium-users"
    jwt_expiry_days: int = 30

    # Bcrypt work factor (higher = more secure but slower)
    # For tests, use 4 for faster execution while maintaining functionality
    bcrypt_work_factor: int = 12

    # Credential shape rules
    username_min_length: int = 3
    username_max_length: int = 50
    password_min_length: int = 4
    password_max_length: int = 100

    # Development-only endpoints (/debug/*). Never enable in production.
    enable_debug_endpoints: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False
    )


settings = Settings()
