"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Literal, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import DEFAULT_SLOT_INTERVAL_MINUTES


class DefaultsConfig(BaseModel):
    """Default settings for slot searches."""
    slot_interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES
    service_duration_minutes: int = 30

    @field_validator("slot_interval_minutes", "service_duration_minutes")
    @classmethod
    def validate_minutes(cls, value: int) -> int:
        """Ensure minute values are positive."""
        if value <= 0:
            raise ValueError("minute values must be greater than zero")
        return value


class SourceConfig(BaseModel):
    """Where bookings and schedules come from."""
    kind: Literal["json", "rest"] = "json"
    data_file: Optional[Path] = None
    base_url: Optional[str] = None
    api_key: str = ""
    timeout_seconds: float = 10

    @model_validator(mode="after")
    def validate_kind_settings(self) -> "SourceConfig":
        """Ensure the selected source kind has what it needs."""
        if self.kind == "json" and self.data_file is None:
            raise ValueError("source.data_file is required for the json source")
        if self.kind == "rest" and not self.base_url:
            raise ValueError("source.base_url is required for the rest source")
        return self


class Barber(BaseModel):
    """Barber configuration."""
    id: str
    name: str  # Used as alias


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "America/Sao_Paulo"
    source: SourceConfig = Field(default_factory=lambda: SourceConfig(data_file=Path("bookings.json")))
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    barbers: List[Barber] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("barbers")
    @classmethod
    def validate_barbers(cls, value: List[Barber]) -> List[Barber]:
        """Ensure barber ids and aliases are unique."""
        seen_ids: set[str] = set()
        seen_names: set[str] = set()
        for barber in value:
            id_key = barber.id.lower()
            name_key = barber.name.lower()
            if id_key in seen_ids:
                raise ValueError(f"Duplicate barber id detected: {barber.id}")
            if name_key in seen_names:
                raise ValueError(f"Duplicate barber name detected: {barber.name}")
            seen_ids.add(id_key)
            seen_names.add(name_key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Relative ``source.data_file`` paths are resolved against the
        config file's directory.

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

        config = cls(**data)

        data_file = config.source.data_file
        if data_file is not None and not data_file.is_absolute():
            config.source.data_file = config_path.parent / data_file

        return config

    def find_barber(self, identifier: str) -> Barber | None:
        """Find a barber by id or name (alias), case-insensitive."""
        key = identifier.lower()
        for barber in self.barbers:
            if barber.id.lower() == key or barber.name.lower() == key:
                return barber
        return None

    def resolve_barber(self, identifier: str) -> str:
        """
        Resolve a barber identifier (id or name) to the barber id.

        Raises:
            ValueError: If identifier cannot be resolved
        """
        barber = self.find_barber(identifier)
        if barber:
            return barber.id

        raise ValueError(
            f"Unknown barber identifier: '{identifier}'. "
            f"Use a configured barber id or name."
        )


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
