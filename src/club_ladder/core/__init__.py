"""Core configuration and utilities for Club Ladder."""

from club_ladder.core.collation import collation_key
from club_ladder.core.config import (
    DEFAULT_FALLBACK_PLAYER_NAME,
    DEFAULT_MAX_CHALLENGE_DISTANCE,
    BookingConfig,
    ClubConfig,
    LadderConfig,
    RosterEntry,
    StorageConfig,
    load_config,
)
from club_ladder.core.errors import (
    ChallengeRejectedError,
    ClubLadderError,
    ConfigurationError,
    DuplicateUserError,
    MatchStateError,
    NoActiveLadderError,
    NotFoundError,
    NotParticipantError,
    SlotUnavailableError,
)

__all__ = [
    "DEFAULT_FALLBACK_PLAYER_NAME",
    "DEFAULT_MAX_CHALLENGE_DISTANCE",
    "BookingConfig",
    "ClubConfig",
    "LadderConfig",
    "RosterEntry",
    "StorageConfig",
    "collation_key",
    "load_config",
    "ChallengeRejectedError",
    "ClubLadderError",
    "ConfigurationError",
    "DuplicateUserError",
    "MatchStateError",
    "NoActiveLadderError",
    "NotFoundError",
    "NotParticipantError",
    "SlotUnavailableError",
]
