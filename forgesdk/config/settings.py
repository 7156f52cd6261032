"""
Client settings loaded from environment variables (prefix ``FORGE_``).
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEOUT_MS = 120_000


class Settings(BaseSettings):
    """Forge client configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(
        default="http://localhost:3000",
        description="Render server base address",
    )
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        gt=0,
        description="Transport-level request timeout in milliseconds",
    )
    log_level: str = Field(default="INFO", description="SDK log level")
