"""
Configuration module for the Vitals Service API.
Uses Pydantic BaseSettings for validation - app fails fast if required config is missing.
"""
import logging
from pathlib import Path
from typing import Dict, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with validation.
    Required fields will cause the app to fail fast if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Store Configuration
    vitals_svc_store_backend: Literal["sqlite", "memory"] = Field(
        default="sqlite",
        description="Key/prefix store backend"
    )
    vitals_svc_db_dir: str = Field(default="data", description="Database directory")
    vitals_svc_db_file: str = Field(default="vitals.db", description="Database filename")
    vitals_svc_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")

    # API Configuration
    vitals_svc_host: str = Field(default="0.0.0.0", description="API host")
    vitals_svc_port: int = Field(default=8000, description="API port")
    vitals_svc_reload: bool = Field(default=False, description="Enable hot reload")
    vitals_svc_default_vitals_limit: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Readings returned by GET /vitals/{patientId} when no limit is given"
    )

    # Bearer token -> user id pairs, "token:user-id,token:user-id"
    vitals_svc_auth_tokens: str = Field(
        ...,  # Required - no default means fail fast if missing
        min_length=1,
        description="Comma-separated token:userId pairs accepted as bearer credentials",
    )

    @field_validator("vitals_svc_auth_tokens")
    @classmethod
    def validate_auth_tokens(cls, value: str) -> str:
        """Reject token lists with malformed pairs before the app starts."""
        for pair in value.split(","):
            token, sep, user_id = pair.strip().partition(":")
            if not sep or not token or not user_id:
                raise ValueError(
                    "VITALS_SVC_AUTH_TOKENS entries must look like 'token:userId'"
                )
        return value

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.vitals_svc_db_dir) / self.vitals_svc_db_file)

    @property
    def auth_token_map(self) -> Dict[str, str]:
        """Bearer tokens mapped to the user id they authenticate."""
        tokens: Dict[str, str] = {}
        for pair in self.vitals_svc_auth_tokens.split(","):
            token, _, user_id = pair.strip().partition(":")
            tokens[token] = user_id
        return tokens

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        if self.vitals_svc_store_backend == "sqlite":
            Path(self.vitals_svc_db_dir).mkdir(parents=True, exist_ok=True)


# Create global settings instance - fails fast if required config is missing
settings = Settings()

# Ensure directories exist on import
settings.ensure_directories()

API_HOST = settings.vitals_svc_host
API_PORT = settings.vitals_svc_port
API_RELOAD = settings.vitals_svc_reload

DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.vitals_svc_db_busy_timeout

DEFAULT_VITALS_LIMIT = settings.vitals_svc_default_vitals_limit
