"""Club Ladder.

Court booking club ladder: challenge eligibility, rank updates after
reported results, and ladder match records backed by DuckDB.
"""

from club_ladder.ladder import (
    ChallengeStatus,
    LadderMatch,
    LadderPlayer,
    apply_ladder_result,
    apply_ladder_result_with_stats,
    booking_to_ladder_match,
    build_ladder_players,
    format_player_stats,
    get_challenge_status,
    update_player_stats,
)

__version__ = "0.1.0"
__all__ = [
    "ChallengeStatus",
    "LadderMatch",
    "LadderPlayer",
    "__version__",
    "apply_ladder_result",
    "apply_ladder_result_with_stats",
    "booking_to_ladder_match",
    "build_ladder_players",
    "format_player_stats",
    "get_challenge_status",
    "update_player_stats",
]
