"""Configuration management for the schema compiler.

Settings are read from environment variables prefixed with ``DOCSCHEMA_``
using Pydantic Settings.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CompilerConfig(BaseSettings):
    """Schema compiler configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSCHEMA_",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "testing", "production"] = Field(
        default="development", description="Application environment"
    )

    # Logging
    log_level: str = Field(
        default="WARNING", description="Level of the docschema logger"
    )
    json_logs: bool = Field(default=False, description="Enable JSON formatted logs")

    # Compilation
    strict_required: bool = Field(
        default=False,
        description=(
            "Reject a `required` predicate on fields that are neither "
            "optional nor nullable"
        ),
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


# Global configuration instance
config = CompilerConfig()
