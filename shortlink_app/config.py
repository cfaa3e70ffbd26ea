from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import string


DEFAULT_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Application
    app_name: str = "Shortlink"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    max_body_size: int = 4096  # Bytes accepted for a destination body

    # Storage
    data: str = "data.json"  # JSON file holding redirects and cursor

    # Symbol generation
    # Character order defines the increment sequence
    alphabet: str = DEFAULT_ALPHABET
    symbol_strategy: str = "sequential"  # Options: "sequential", "keyed"
    symbol_secret: Optional[str] = Field(default=None, repr=False)  # Keyed strategy only

    # Authorization
    token: Optional[str] = Field(default=None, repr=False)  # Bearer token for mutations

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("alphabet")
    @classmethod
    def check_alphabet(cls, value: str) -> str:
        if not value:
            raise ValueError("alphabet must not be empty")
        if len(set(value)) != len(value):
            raise ValueError("alphabet characters must be unique")
        return value


# Create settings instance
settings = Settings()
