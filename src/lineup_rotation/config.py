"""Configuration management for the lineup rotation engine with dotenv support."""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogFormat(str, Enum):
    """Log renderer selection."""
    JSON = "json"
    TEXT = "text"
    STRUCTURED = "structured"


class AppSettings(BaseSettings):
    """Application settings with dotenv support.

    Environment variables can be set directly or via .env file.
    The scheduling functions never read these; the CLI and other calling
    layers pass the values in explicitly.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

    # ===================
    # Logging
    # ===================
    LOG_LEVEL: str = Field(default='INFO', description='Logging level')
    LOG_FORMAT: LogFormat = Field(default=LogFormat.TEXT, description='Log format: json, text, or structured')

    # ===================
    # Scheduling defaults
    # ===================
    BALANCE_TOLERANCE: float = Field(
        default=0.05,
        gt=0.0,
        lt=1.0,
        description='Allowed relative deviation from the equal playing-time share'
    )
    ENABLE_BALANCING: bool = Field(
        default=True,
        description='Insert a corrective round when projections drift outside tolerance'
    )
    DEFAULT_MINUTES_PER_HALF: int = Field(default=30, ge=1, description='Half length used by the CLI')
    DEFAULT_MAX_SIMULTANEOUS_SUBS: int = Field(
        default=2,
        ge=1,
        description='Substitution cap used by the CLI when none is given'
    )

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(valid_levels)}")
        return v_upper

    @field_validator('LOG_FORMAT', mode='before')
    @classmethod
    def validate_log_format(cls, v):
        if isinstance(v, str):
            return v.lower()
        return v


@lru_cache()
def get_settings() -> AppSettings:
    """Get cached application settings.

    Loads settings from:
    1. Environment variables
    2. .env file (if exists)
    3. Default values

    Returns:
        AppSettings: Cached settings instance
    """
    return AppSettings()
