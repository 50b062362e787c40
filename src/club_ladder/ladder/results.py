"""Rank and win/loss updates after a reported ladder result."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass, replace

import structlog

from club_ladder.ladder.challenge import find_index
from club_ladder.ladder.players import LadderPlayer

logger = structlog.get_logger()


@dataclass(frozen=True)
class StatsUpdate:
    """Win/loss counters to persist for one user."""

    uid: str
    ladder_wins: int
    ladder_losses: int


def _resolve_match_indices(
    ladder: Sequence[LadderPlayer], winner_id: str, loser_id: str
) -> tuple[int, int] | None:
    winner_index = find_index(ladder, winner_id)
    loser_index = find_index(ladder, loser_id)
    if winner_index == -1 or loser_index == -1 or winner_index == loser_index:
        return None
    return winner_index, loser_index


def _is_invalid_result(winner_id: str, loser_id: str) -> bool:
    if winner_id != loser_id:
        return False
    logger.warning("invalid_ladder_result", winner_id=winner_id, loser_id=loser_id)
    return True


def _promote(ladder: list[LadderPlayer], winner_index: int, loser_index: int) -> None:
    # Single-element move: everyone from the loser down shifts one place.
    winner = ladder.pop(winner_index)
    ladder.insert(loser_index, winner)


def apply_ladder_result(
    ladder: list[LadderPlayer], winner_id: str, loser_id: str
) -> list[LadderPlayer]:
    """Reorder the ladder after a result, leaving stats untouched.

    A winner ranked below the loser takes the loser's position; the loser and
    everyone between them move down one place. Degenerate input (same id, unknown
    id) and a winner already above the loser return the input ladder.

    Args:
        ladder: Current ordering, top rank first.
        winner_id: Id of the winning player.
        loser_id: Id of the losing player.

    Returns:
        The new ordering, or ``ladder`` itself when nothing changes.
    """
    indices = _resolve_match_indices(ladder, winner_id, loser_id)
    if indices is None:
        return ladder

    winner_index, loser_index = indices
    if winner_index < loser_index:
        return ladder

    updated = list(ladder)
    _promote(updated, winner_index, loser_index)
    return updated


def update_player_stats(
    ladder: list[LadderPlayer], winner_id: str, loser_id: str
) -> list[LadderPlayer]:
    """Record a win for the winner and a loss for the loser without reordering."""
    if _is_invalid_result(winner_id, loser_id):
        return ladder
    if _resolve_match_indices(ladder, winner_id, loser_id) is None:
        return ladder

    updated: list[LadderPlayer] = []
    for player in ladder:
        if player.id == winner_id:
            updated.append(replace(player, wins=player.wins + 1))
        elif player.id == loser_id:
            updated.append(replace(player, losses=player.losses + 1))
        else:
            updated.append(player)
    return updated


def apply_ladder_result_with_stats(
    ladder: list[LadderPlayer], winner_id: str, loser_id: str
) -> list[LadderPlayer]:
    """Record the result's stats and apply the promotion rule.

    Stats always change for a valid result; the order only changes when the
    winner was ranked below the loser. Invalid input logs a warning (same
    player on both sides) and returns the input ladder.

    Args:
        ladder: Current ordering, top rank first.
        winner_id: Id of the winning player.
        loser_id: Id of the losing player.

    Returns:
        The updated ordering.
    """
    if _is_invalid_result(winner_id, loser_id):
        return ladder

    indices = _resolve_match_indices(ladder, winner_id, loser_id)
    if indices is None:
        return ladder

    winner_index, loser_index = indices
    updated = list(ladder)
    winner = updated[winner_index]
    loser = updated[loser_index]
    updated[winner_index] = replace(winner, wins=winner.wins + 1)
    updated[loser_index] = replace(loser, losses=loser.losses + 1)

    if winner_index > loser_index:
        _promote(updated, winner_index, loser_index)
    return updated


def format_player_stats(player: LadderPlayer) -> str:
    """Format a win/loss record as ``"wins–losses"``."""
    return f"{player.wins}–{player.losses}"


def merge_ladder_order(
    base_players: Sequence[LadderPlayer], stored_order: Sequence[str]
) -> list[LadderPlayer]:
    """Apply a persisted ordering to freshly built players.

    Players keep the stats from ``base_players``. Ids in the stored order that
    are no longer in the roster are dropped; players missing from it are
    appended in their base order.

    Args:
        base_players: Players from the registry, in default order.
        stored_order: Persisted player ids, top rank first.

    Returns:
        Merged ordering.
    """
    by_id = {player.id: player for player in base_players}
    ordered: list[LadderPlayer] = []
    seen: set[str] = set()
    for player_id in stored_order:
        player = by_id.get(player_id)
        if player is None or player_id in seen:
            continue
        ordered.append(player)
        seen.add(player_id)

    ordered.extend(player for player in base_players if player.id not in seen)
    return ordered


def build_stats_updates(
    ladder: Sequence[LadderPlayer],
    player_ids: Sequence[str],
    known_user_ids: Collection[str],
) -> list[StatsUpdate]:
    """Collect the counters to persist for the given players.

    Placeholder players that are not stored users are skipped.
    """
    players_by_id = {player.id: player for player in ladder}
    updates: list[StatsUpdate] = []
    for player_id in player_ids:
        player = players_by_id.get(player_id)
        if player is None or player.id not in known_user_ids:
            continue
        updates.append(
            StatsUpdate(uid=player.id, ladder_wins=player.wins, ladder_losses=player.losses)
        )
    return updates
