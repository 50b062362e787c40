"""Custom exceptions for configuration, storage and ladder actions."""

from __future__ import annotations


class ClubLadderError(Exception):
    """Base exception for club ladder errors with optional suggestions."""

    prefix = "Ladder Error"

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"[{self.prefix}] {self.message}"
        if self.suggestion:
            msg += f"\n[Suggestion] {self.suggestion}"
        return msg


class ConfigurationError(ClubLadderError):
    """Error when the club configuration is unusable."""

    prefix = "Configuration Error"


class NotFoundError(ClubLadderError):
    """Error when a stored record does not exist."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(
            f"{kind} '{record_id}' was not found",
            f"Check the {kind.lower()} id and try again.",
        )


class NoActiveLadderError(ClubLadderError):
    """Error when an action needs a ladder but none is active."""

    def __init__(self) -> None:
        super().__init__(
            "There is no active ladder",
            "Create one with 'club-ladder create-ladder NAME' or pass --ladder.",
        )


class NotParticipantError(ClubLadderError):
    """Error when a user acts on a ladder they have not joined."""

    def __init__(self, user_id: str, ladder_name: str) -> None:
        super().__init__(
            f"User '{user_id}' has not joined {ladder_name}",
            "Join the ladder before challenging other players.",
        )


class ChallengeRejectedError(ClubLadderError):
    """Error when a challenge is not allowed by the ladder rules."""

    def __init__(self, reason: str, message: str) -> None:
        self.reason = reason
        super().__init__(message)


class SlotUnavailableError(ClubLadderError):
    """Error when the requested court slot overlaps an existing booking."""

    def __init__(self, start: str, end: str) -> None:
        super().__init__(
            f"The court is already booked between {start} and {end}",
            "Pick another time slot.",
        )


class MatchStateError(ClubLadderError):
    """Error when a match cannot take the requested transition."""


class DuplicateUserError(ClubLadderError):
    """Error when a user id is already registered."""

    def __init__(self, uid: str) -> None:
        self.uid = uid
        super().__init__(
            f"User '{uid}' already exists",
            "Pick another user id.",
        )
