"""Challenge eligibility rules for the ladder."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from club_ladder.core.config import DEFAULT_MAX_CHALLENGE_DISTANCE
from club_ladder.ladder.players import LadderPlayer

ChallengeReason = Literal["self", "lower-ranked", "too-far", "missing"]

MAX_CHALLENGE_DISTANCE = DEFAULT_MAX_CHALLENGE_DISTANCE

CHALLENGE_REASON_MESSAGES: dict[ChallengeReason, str] = {
    "self": "Du kan inte utmana dig själv.",
    "lower-ranked": "Du kan bara utmana spelare som ligger högre upp på stegen.",
    "too-far": "Du kan bara utmana spelare upp till {max_distance} placeringar ovanför dig.",
    "missing": "Spelaren kunde inte hittas i stegen.",
}


@dataclass(frozen=True)
class ChallengeStatus:
    """Outcome of an eligibility check.

    Attributes:
        eligible: Whether the challenge may be issued.
        reason: Why it may not, when ineligible.
        max_distance: Window the check used; only affects the message.
    """

    eligible: bool
    reason: ChallengeReason | None = None
    max_distance: int = field(default=MAX_CHALLENGE_DISTANCE, compare=False, repr=False)

    @classmethod
    def allowed(cls) -> ChallengeStatus:
        return cls(eligible=True)

    @classmethod
    def rejected(
        cls, reason: ChallengeReason, max_distance: int = MAX_CHALLENGE_DISTANCE
    ) -> ChallengeStatus:
        return cls(eligible=False, reason=reason, max_distance=max_distance)

    @property
    def message(self) -> str | None:
        """User-facing explanation for a rejected challenge."""
        if self.reason is None:
            return None
        return CHALLENGE_REASON_MESSAGES[self.reason].format(max_distance=self.max_distance)


def find_index(ladder: Sequence[LadderPlayer], player_id: str) -> int:
    """Position of a player in the ladder, or -1 when absent."""
    for index, player in enumerate(ladder):
        if player.id == player_id:
            return index
    return -1


def get_challenge_status(
    ladder: Sequence[LadderPlayer],
    challenger_id: str,
    opponent_id: str,
    *,
    max_distance: int = MAX_CHALLENGE_DISTANCE,
) -> ChallengeStatus:
    """Decide whether a challenge may be issued.

    A player may only challenge someone ranked strictly above them, and at most
    ``max_distance`` positions above. Checks run in a fixed order: self-challenge,
    missing players, direction, distance.

    Args:
        ladder: Current ordering, top rank first.
        challenger_id: Player issuing the challenge.
        opponent_id: Player being challenged.
        max_distance: Largest allowed rank difference.

    Returns:
        The eligibility status; never raises.
    """
    if challenger_id == opponent_id:
        return ChallengeStatus.rejected("self")

    challenger_index = find_index(ladder, challenger_id)
    opponent_index = find_index(ladder, opponent_id)
    if challenger_index == -1 or opponent_index == -1:
        return ChallengeStatus.rejected("missing")

    position_difference = challenger_index - opponent_index
    if position_difference <= 0:
        return ChallengeStatus.rejected("lower-ranked")

    if position_difference > max_distance:
        return ChallengeStatus.rejected("too-far", max_distance)

    return ChallengeStatus.allowed()


def challengeable_opponents(
    ladder: Sequence[LadderPlayer],
    challenger_id: str,
    *,
    max_distance: int = MAX_CHALLENGE_DISTANCE,
) -> list[LadderPlayer]:
    """Players the challenger may currently challenge, top rank first."""
    return [
        player
        for player in ladder
        if get_challenge_status(ladder, challenger_id, player.id, max_distance=max_distance).eligible
    ]
