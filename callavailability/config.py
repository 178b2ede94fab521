"""
Configuration management using Pydantic and YAML.
"""

from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pendulum import Timezone
from pydantic import BaseModel, Field, field_validator

from .domain.models import CallLimitations


class LimitationsConfig(BaseModel):
    """Booking limits of the call offering."""
    minimum_notice_in_minutes: Optional[int] = None
    maximum_calls_per_day: Optional[int] = None

    @field_validator("minimum_notice_in_minutes", "maximum_calls_per_day")
    @classmethod
    def validate_not_negative(cls, value: Optional[int]) -> Optional[int]:
        """Ensure limits are either unset or zero and above."""
        if value is not None and value < 0:
            raise ValueError(f"Limits must not be negative, got {value}")
        return value

    def to_limitations(self) -> CallLimitations:
        """Convert to the domain model."""
        return CallLimitations.from_minutes(
            minimum_notice_in_minutes=self.minimum_notice_in_minutes,
            maximum_calls_per_day=self.maximum_calls_per_day,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Berlin"
    data_file: Path = Path("calls.json")
    limitations: LimitationsConfig = Field(default_factory=LimitationsConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    def get_zone(self) -> Timezone:
        """Get the configured timezone as a pendulum Timezone."""
        return pendulum.timezone(self.timezone)

    def resolve_data_file(self, config_path: Path) -> Path:
        """Resolve a relative data file path against the config file location."""
        if self.data_file.is_absolute():
            return self.data_file
        return config_path.parent / self.data_file

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


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of callavailability/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
