"""
Application Configuration Module
Handles environment variable loading and application settings.
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from interview_coach.core.constants import MAX_RESUME_BYTES


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    # AI backend selection: "gemini" (hosted LLM API) or "openai" (chat-completion API)
    ai_backend: str = "gemini"

    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    openai_api_key: str = ""
    openai_base_url: Optional[str] = None  # None uses the SDK default endpoint
    openai_model: str = "gpt-4o-mini"

    # Generation defaults (per-call options override these)
    ai_temperature: float = 0.7
    ai_max_output_tokens: int = 1024

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origin: str = "http://localhost:5173"

    # Session store
    database_url: str = "sqlite+aiosqlite:///./interview_coach.db"

    # Resume upload limit in bytes
    max_resume_bytes: int = MAX_RESUME_BYTES

    # Logging
    log_level: str = "INFO"
    log_format: str = ""  # "json" for structured output
    log_file: Optional[str] = None  # extra JSON-lines log file

    # Practice client
    api_url: str = "http://localhost:5000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def json_logging(self) -> bool:
        return self.log_format.lower() == "json"
