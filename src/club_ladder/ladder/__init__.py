"""Ladder engine for Club Ladder.

Pure functions for building the ladder, checking challenges, applying
reported results, and projecting bookings into ladder matches.
"""

from club_ladder.ladder.challenge import (
    CHALLENGE_REASON_MESSAGES,
    MAX_CHALLENGE_DISTANCE,
    ChallengeReason,
    ChallengeStatus,
    challengeable_opponents,
    find_index,
    get_challenge_status,
)
from club_ladder.ladder.matches import (
    LadderMatch,
    LadderStatus,
    MatchUpdate,
    apply_match_update,
    booking_to_ladder_match,
    build_ladder_matches,
)
from club_ladder.ladder.players import (
    LadderPlayer,
    SessionUser,
    build_ladder_players,
    default_fallback_roster,
    resolve_player_name,
    roster_from_entries,
)
from club_ladder.ladder.results import (
    StatsUpdate,
    apply_ladder_result,
    apply_ladder_result_with_stats,
    build_stats_updates,
    format_player_stats,
    merge_ladder_order,
    update_player_stats,
)

__all__ = [
    "CHALLENGE_REASON_MESSAGES",
    "MAX_CHALLENGE_DISTANCE",
    "ChallengeReason",
    "ChallengeStatus",
    "LadderMatch",
    "LadderPlayer",
    "LadderStatus",
    "MatchUpdate",
    "SessionUser",
    "StatsUpdate",
    "apply_ladder_result",
    "apply_ladder_result_with_stats",
    "apply_match_update",
    "booking_to_ladder_match",
    "build_ladder_matches",
    "build_ladder_players",
    "build_stats_updates",
    "challengeable_opponents",
    "default_fallback_roster",
    "find_index",
    "format_player_stats",
    "get_challenge_status",
    "merge_ladder_order",
    "resolve_player_name",
    "roster_from_entries",
    "update_player_stats",
]
