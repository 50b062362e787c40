"""Configuration schemas and loading for Club Ladder."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_MAX_CHALLENGE_DISTANCE = 4
DEFAULT_FALLBACK_PLAYER_NAME = "Spelare"


class RosterEntry(BaseModel):
    """A placeholder player shown when no real users exist."""

    id: str
    name: str


def _default_roster() -> list[RosterEntry]:
    names = [
        "Elin Andersson",
        "Johan Larsson",
        "Sara Nilsson",
        "Oskar Svensson",
        "Lina Berg",
        "Erik Persson",
        "Maja Lind",
        "Victor Holm",
    ]
    return [RosterEntry(id=f"mock-{i}", name=name) for i, name in enumerate(names, start=1)]


class LadderConfig(BaseModel):
    """Ladder rule configuration.

    Attributes:
        max_challenge_distance: How many positions above themselves a player may
            challenge.
        collation_locale: Locale used to sort player names into the initial order.
        fallback_player_name: Name used when a user has neither display name nor email.
        fallback_roster: Placeholder players used when the club has no users yet.
    """

    max_challenge_distance: int = Field(default=DEFAULT_MAX_CHALLENGE_DISTANCE, ge=1, le=20)
    collation_locale: str = "sv"
    fallback_player_name: str = DEFAULT_FALLBACK_PLAYER_NAME
    fallback_roster: list[RosterEntry] = Field(default_factory=_default_roster)

    @field_validator("fallback_roster")
    @classmethod
    def validate_unique_roster_ids(cls, v: list[RosterEntry]) -> list[RosterEntry]:
        ids = [entry.id for entry in v]
        if len(ids) != len(set(ids)):
            msg = "Fallback roster ids must be unique"
            raise ValueError(msg)
        return v


class StorageConfig(BaseModel):
    """Database location."""

    database_path: str = "./club.duckdb"


class BookingConfig(BaseModel):
    """Court booking defaults."""

    slot_minutes: int = Field(default=60, ge=15)


class ClubConfig(BaseModel):
    """Complete club configuration."""

    club_name: str = "Tennisklubben"
    ladder: LadderConfig = Field(default_factory=LadderConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    booking: BookingConfig = Field(default_factory=BookingConfig)


def load_config(path: str | Path) -> ClubConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to YAML configuration file.

    Returns:
        Validated ClubConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValidationError: If config is invalid.
    """
    config_path = Path(path)
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with config_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return ClubConfig.model_validate(data or {})
