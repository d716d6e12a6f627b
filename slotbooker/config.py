"""
Configuration management using Pydantic models loaded from YAML.
"""

import uuid
from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import ConfigError
from .domain.models import Event
from .domain.policy import SchedulingPolicy, ScoringWeights


def _validate_hour(value: int) -> int:
    if not 0 <= value <= 23:
        raise ValueError(f"Hour must be between 0 and 23, got {value}")
    return value


class SchedulingConfig(BaseModel):
    """Enumeration grid and exclusion rules."""
    step_minutes: int = 15
    lunch_start_hour: int = 13
    lunch_end_hour: int = 14
    excluded_start_hour: int = 12
    max_window_days: int = 31
    default_duration_minutes: int = 30

    @field_validator("step_minutes", "max_window_days", "default_duration_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure grid and limits are positive."""
        if value <= 0:
            raise ValueError("value must be greater than zero")
        return value

    @field_validator("lunch_start_hour", "lunch_end_hour", "excluded_start_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        return _validate_hour(v)

    @model_validator(mode="after")
    def validate_lunch_order(self) -> "SchedulingConfig":
        """Ensure the lunch window opens before it closes."""
        if self.lunch_end_hour <= self.lunch_start_hour:
            raise ValueError("lunch_end_hour must be later than lunch_start_hour")
        return self

    def to_policy(self) -> SchedulingPolicy:
        return SchedulingPolicy(
            step_minutes=self.step_minutes,
            lunch_start_hour=self.lunch_start_hour,
            lunch_end_hour=self.lunch_end_hour,
            excluded_start_hour=self.excluded_start_hour,
            max_window_days=self.max_window_days,
        )


class ScoringConfig(BaseModel):
    """Scoring weights; every value is a non-negative integer."""
    hour_weight: int = 2
    working_start_hour: int = 9
    working_end_hour: int = 17
    off_hours_penalty: int = 20
    buffer_minutes: int = 15
    buffer_penalty: int = 10
    short_gap_minutes: int = 30
    short_gap_penalty: int = 5

    @field_validator("*")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("scoring values must not be negative")
        return value

    def to_weights(self) -> ScoringWeights:
        return ScoringWeights(**self.model_dump())


class Participant(BaseModel):
    """Participant directory entry."""
    id: str
    name: str = ""

    def display_name(self) -> str:
        """Get display name."""
        return self.name or self.id


class SeedEvent(BaseModel):
    """Existing calendar entry loaded into the store at start-up."""
    id: Optional[str] = None
    title: str = "Existing Meeting"
    participant_id: str
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_timestamp(cls, value: str) -> str:
        """Ensure timestamps parse as ISO 8601 date-times."""
        pendulum.parse(value)
        return value

    @model_validator(mode="after")
    def validate_order(self) -> "SeedEvent":
        if pendulum.parse(self.start) >= pendulum.parse(self.end):
            raise ValueError(f"Seed event start {self.start} must be before end {self.end}")
        return self

    def to_event(self) -> Event:
        return Event(
            id=self.id or str(uuid.uuid4()),
            title=self.title,
            participant_id=self.participant_id,
            start=pendulum.parse(self.start),
            end=pendulum.parse(self.end),
        )


class ServerConfig(BaseModel):
    """HTTP server binding."""
    host: str = "127.0.0.1"
    port: int = 8080


class AppConfig(BaseModel):
    """Application configuration."""
    display_timezone: str = "UTC"
    log_level: str = "INFO"
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    participants: List[Participant] = Field(default_factory=list)
    seed_events: List[SeedEvent] = Field(default_factory=list)

    @field_validator("display_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the display timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("participants")
    @classmethod
    def validate_participants(cls, value: List[Participant]) -> List[Participant]:
        """Ensure participant ids are unique."""
        seen_ids: set[str] = set()
        for participant in value:
            if participant.id in seen_ids:
                raise ValueError(f"Duplicate participant id detected: {participant.id}")
            seen_ids.add(participant.id)
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
            ConfigError: If the file is not valid YAML or not a mapping
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
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping at the root level.")

        return cls(**data)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppConfig":
        """
        Load an explicit config file, or the default one if it exists.

        Falls back to built-in defaults when no path is given and no default
        file is present.
        """
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)
        return cls()

    def find_participant(self, participant_id: str) -> Participant | None:
        """Find a participant by id."""
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def build_seed_events(self) -> List[Event]:
        return [seed.to_event() for seed in self.seed_events]


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of slotbooker/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
