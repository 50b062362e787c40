"""Ladder player registry: builds the initial ladder ordering from club users."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from club_ladder.core.collation import collation_key
from club_ladder.core.config import DEFAULT_FALLBACK_PLAYER_NAME, RosterEntry


@dataclass(frozen=True)
class LadderPlayer:
    """A participant's identity and season record.

    The player's rank is not stored here; it is the player's index in the
    ladder list (0 = top).

    Attributes:
        id: Stable user identifier.
        name: Display name.
        wins: Recorded match wins this season.
        losses: Recorded match losses this season.
    """

    id: str
    name: str
    wins: int = 0
    losses: int = 0


@dataclass(frozen=True)
class SessionUser:
    """The signed-in user as supplied by the identity provider."""

    uid: str
    email: str = ""
    display_name: str | None = None


class UserRecord(Protocol):
    """Minimal shape of a stored club user."""

    uid: str
    email: str
    display_name: str | None


FallbackRoster = Callable[[], Sequence[LadderPlayer]]

_DEFAULT_ROSTER = (
    LadderPlayer(id="mock-1", name="Elin Andersson"),
    LadderPlayer(id="mock-2", name="Johan Larsson"),
    LadderPlayer(id="mock-3", name="Sara Nilsson"),
    LadderPlayer(id="mock-4", name="Oskar Svensson"),
    LadderPlayer(id="mock-5", name="Lina Berg"),
    LadderPlayer(id="mock-6", name="Erik Persson"),
    LadderPlayer(id="mock-7", name="Maja Lind"),
    LadderPlayer(id="mock-8", name="Victor Holm"),
)


def default_fallback_roster() -> list[LadderPlayer]:
    """Placeholder players used when the club has no users."""
    return list(_DEFAULT_ROSTER)


def roster_from_entries(entries: Sequence[RosterEntry]) -> FallbackRoster:
    """Create a fallback roster provider from configured entries."""
    players = [LadderPlayer(id=entry.id, name=entry.name) for entry in entries]

    def _roster() -> list[LadderPlayer]:
        return list(players)

    return _roster


def resolve_player_name(
    user: UserRecord | SessionUser,
    fallback_name: str = DEFAULT_FALLBACK_PLAYER_NAME,
) -> str:
    """Resolve a display name: display name, then email local part, then fallback."""
    display_name = getattr(user, "display_name", None)
    if isinstance(display_name, str) and display_name:
        return display_name

    email = getattr(user, "email", None)
    email = email.strip() if isinstance(email, str) else ""
    email_name = email.split("@")[0] if email else ""
    return email_name or fallback_name


def _stat(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


def player_from_user(
    user: UserRecord,
    fallback_name: str = DEFAULT_FALLBACK_PLAYER_NAME,
) -> LadderPlayer:
    """Map a stored user to a ladder player, defaulting missing counters to 0."""
    return LadderPlayer(
        id=user.uid,
        name=resolve_player_name(user, fallback_name),
        wins=_stat(getattr(user, "ladder_wins", None)),
        losses=_stat(getattr(user, "ladder_losses", None)),
    )


def build_ladder_players(
    users: Sequence[UserRecord] | None,
    current_user: SessionUser | None,
    participant_ids: Sequence[str] | None = None,
    *,
    fallback_roster: FallbackRoster = default_fallback_roster,
    locale: str = "sv",
    fallback_name: str = DEFAULT_FALLBACK_PLAYER_NAME,
) -> list[LadderPlayer]:
    """Build the default ladder ordering.

    Players are sorted alphabetically by name with the locale's collation; this
    is the starting rank order before any result is reported. The session user
    is appended with zero stats when missing, unless a participant filter is
    active and does not include them.

    Args:
        users: Known club users. Empty or None uses the fallback roster.
        current_user: The signed-in user, if any.
        participant_ids: Ids of players who joined the ladder. Empty or None
            disables filtering.
        fallback_roster: Provider of placeholder players.
        locale: Collation locale for the alphabetical order.
        fallback_name: Name for users with neither display name nor email.

    Returns:
        Ladder ordering, top rank first.
    """
    if users:
        players = [player_from_user(user, fallback_name) for user in users]
    else:
        players = list(fallback_roster())

    filtering = bool(participant_ids)
    if filtering:
        participant_set = set(participant_ids or ())
        players = [player for player in players if player.id in participant_set]

    key = collation_key(locale)
    ordered = sorted(players, key=lambda player: key(player.name))

    if current_user is None:
        return ordered

    if any(player.id == current_user.uid for player in ordered):
        return ordered

    if filtering and current_user.uid not in (participant_ids or ()):
        return ordered

    ordered.append(
        LadderPlayer(id=current_user.uid, name=resolve_player_name(current_user, fallback_name))
    )
    return ordered
