# /memora/config/settings.py

import sys
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Deployment
    environment: str = Field(default="production")
    api_version: str = "v1"
    workers: int = 4
    allowed_hosts: str = "localhost,127.0.0.1,testserver"

    # Redis (conversation history & analytics)
    redis_url: str = "redis://localhost:6379"
    history_key_prefix: str = "memora:assistant"
    redis_socket_timeout_seconds: float = 2.0

    # Assistant behaviour
    max_live_conversations: int = 1000
    max_conversation_history: int = 100
    max_saved_conversations: int = 20
    max_analytics_events: int = 500
    max_input_length: int = 2000
    thinking_delay_ms: int = 0
    dispatch_timeout_seconds: float = 5.0
    command_prefix: str = "/"

    # Security & limits
    api_key: str | None = None
    rate_limit_per_minute: int = 100

    cors_allowed_origins: List[str] = Field(
        default=[
            "http://localhost:3000",
        ]
    )

    # ---------------- Validators ---------------- #

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def parse_cors_allowed_origins(cls, v):
        """
        Accept both a comma-separated string and a list for cors_allowed_origins.
        """
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


def validate_environment(settings_obj: Settings):
    try:
        for name in [
            "max_live_conversations",
            "max_conversation_history",
            "max_saved_conversations",
            "max_analytics_events",
            "max_input_length",
        ]:
            if getattr(settings_obj, name) <= 0:
                raise ValueError(f"{name.upper()} must be a positive integer")

        if len(settings_obj.command_prefix) != 1:
            raise ValueError("COMMAND_PREFIX must be exactly one character")

        if settings_obj.redis_socket_timeout_seconds <= 0:
            raise ValueError("REDIS_SOCKET_TIMEOUT_SECONDS must be positive")

        if settings_obj.dispatch_timeout_seconds <= 0:
            raise ValueError("DISPATCH_TIMEOUT_SECONDS must be positive")

        return settings_obj

    except Exception as e:
        print(f"--- [ERROR] Environment validation failed: {e}")
        sys.exit(1)


settings = Settings()
validate_environment(settings)
