import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deltasnap.constants import DEFAULT_DELTA_LOG_DIR


class DeltaSnapSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DELTASNAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: str = Field(
        default="dev",
        description="Application deployment environment (e.g., dev, qa, uat, prod, local). Stamped onto every log record."
    )

    log_level: str = Field(
        default="INFO",
        description="Base log level used by setup_logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    delta_log_dir_name: str = Field(
        default=DEFAULT_DELTA_LOG_DIR,
        description="Name of the transaction log directory under a table root"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and upper-case the log level name.

        Args:
            v: The configured log level

        Returns:
            Upper-cased level name
        """
        level = (v or "").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(
                f"Invalid log level '{v}'. "
                f"Expected one of DEBUG, INFO, WARNING, ERROR, CRITICAL."
            )
        return level

    @field_validator("delta_log_dir_name")
    @classmethod
    def validate_delta_log_dir_name(cls, v: str) -> str:
        """Ensure the log directory name is a single path segment."""
        name = (v or "").strip().strip("/\\")
        if not name or "/" in name or "\\" in name:
            raise ValueError(
                f"Invalid transaction log directory name '{v}'. "
                f"It must be a single, non-empty path segment."
            )
        return name

