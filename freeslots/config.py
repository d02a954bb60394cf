"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.answer import SUPPORTED_LOCALES

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _validate_hour(v: int) -> int:
    """Hours are offsets from midnight; 24 means the following midnight."""
    if not 0 <= v <= 24:
        raise ValueError(f"Hour must be between 0 and 24, got {v}")
    return v


class WorkDayConfig(BaseModel):
    """Work window used when computing free slots."""
    start_hour: int = 7
    end_hour: int = 18
    allow_default_hours: bool = False

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        return _validate_hour(v)


class SuggestionsConfig(BaseModel):
    """How many free slots are offered as suggestions."""
    limit: int = 3

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("limit must be greater than zero")
        return value


class BusinessDayConfig(BaseModel):
    """Window emitted for the next business day."""
    start_hour: int = 8
    end_hour: int = 16
    exclude_days: List[int] = Field(default_factory=lambda: [5, 6])  # Saturday, Sunday

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        return _validate_hour(v)

    @field_validator("exclude_days")
    @classmethod
    def validate_exclude_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"exclude_days must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        deduped: List[int] = []
        for day in value:
            if day not in deduped:
                deduped.append(day)
        if len(deduped) == 7:
            raise ValueError("exclude_days cannot exclude every day of the week")
        return deduped

    @model_validator(mode="after")
    def validate_hours_order(self) -> "BusinessDayConfig":
        """Ensure the business window opens before it closes."""
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be later than start_hour")
        return self


class AnswerConfig(BaseModel):
    """Display settings for the generated sentence."""
    utc_offset_hours: int = 1
    locale: str = "fr"

    @field_validator("utc_offset_hours")
    @classmethod
    def validate_offset(cls, value: int) -> int:
        if not -12 <= value <= 14:
            raise ValueError(f"utc_offset_hours must be between -12 and 14, got {value}")
        return value

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, value: str) -> str:
        if value not in SUPPORTED_LOCALES:
            raise ValueError(f"locale must be one of {SUPPORTED_LOCALES}, got '{value}'")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    work_day: WorkDayConfig = Field(default_factory=WorkDayConfig)
    suggestions: SuggestionsConfig = Field(default_factory=SuggestionsConfig)
    business_day: BusinessDayConfig = Field(default_factory=BusinessDayConfig)
    answer: AnswerConfig = Field(default_factory=AnswerConfig)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got '{value}'")
        return level

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
                f"See config.example.yaml for reference."
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
    def load(cls, config_path: Path | None = None) -> "AppConfig":
        """
        Load an explicit config file, or the default one if it exists.

        Falls back to built-in defaults when no path was given and no
        config.yaml is present.
        """
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)

        return cls()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
