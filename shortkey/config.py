"""Configuration management for shortkey."""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host both listeners bind to"
    )

    socket_port: int = Field(
        default=1337,
        ge=0,
        le=65535,
        description="TCP port of the line-based registration listener"
    )

    http_port: int = Field(
        default=8080,
        ge=0,
        le=65535,
        description="Port of the HTTP resolution listener"
    )

    http_timeout_keep_alive: int = Field(
        default=120,
        ge=1,
        description="Seconds an idle HTTP connection is kept open"
    )

    http_max_header_bytes: int = Field(
        default=1 << 20,
        ge=1024,
        description="Upper bound on buffered request header bytes"
    )

    # Key settings
    key_length: int = Field(
        default=6,
        ge=1,
        description="Length of generated keys"
    )

    max_key_attempts: int = Field(
        default=100,
        ge=1,
        description="Maximum draws before key generation gives up"
    )

    seed_urls: List[str] = Field(
        default_factory=list,
        description="URLs registered at startup (JSON list when set from the environment)"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_prefix": "SHORTKEY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
