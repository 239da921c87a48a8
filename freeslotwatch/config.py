"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class PollingConfig(BaseModel):
    """Timing of the polling loop and of the upstream queries."""
    interval_seconds: int = 900
    retry_delay_seconds: int = 60
    lookahead_days: int = 14
    request_timeout_seconds: float = 30

    @field_validator(
        "interval_seconds",
        "retry_delay_seconds",
        "lookahead_days",
        "request_timeout_seconds",
    )
    @classmethod
    def validate_positive(cls, value):
        """Ensure timing values are positive."""
        if value <= 0:
            raise ValueError(f"Value must be greater than zero, got {value}")
        return value


class NotificationConfig(BaseModel):
    """Push notification settings (ntfy-style HTTP endpoint)."""
    enabled: bool = False
    server: str = "https://ntfy.sh"
    topic: Optional[str] = None
    token: Optional[str] = None  # Falls back to the keyring when unset
    title: str = "New free slots"

    @model_validator(mode="after")
    def validate_topic(self) -> "NotificationConfig":
        """A topic is required once notifications are switched on."""
        if self.enabled and not self.topic:
            raise ValueError("notifications.topic is required when notifications are enabled")
        return self

    def get_topic_url(self) -> str:
        """Get the full URL notifications are posted to."""
        return f"{self.server.rstrip('/')}/{self.topic}"


class AppConfig(BaseModel):
    """Application configuration."""
    resource_id: str = "axwzr3i57yba"
    api_base_url: str = "https://api.hel.fi/respa/v1"
    timezone: str = "Europe/Helsinki"
    snapshot_file: Path = Path("available_times.json")
    min_duration_minutes: int = 0
    polling: PollingConfig = Field(default_factory=PollingConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("min_duration_minutes")
    @classmethod
    def validate_min_duration(cls, value: int) -> int:
        """Ensure the minimum slot duration is not negative."""
        if value < 0:
            raise ValueError("min_duration_minutes must not be negative")
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppConfig":
        """
        Load an explicitly given config file, else ./config.yaml, else defaults.
        """
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)

        logger.info("No config file found at %s, using built-in defaults", default_path)
        return cls()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.cwd() / "config.yaml"
