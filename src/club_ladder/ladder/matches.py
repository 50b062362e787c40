"""Projection of court bookings into ladder matches."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Literal, Protocol

from pydantic import BaseModel

LadderStatus = Literal["planned", "completed"]


class BookingRecord(Protocol):
    """Shape of a scheduled court slot that may carry ladder fields."""

    id: str
    start_date: str
    end_date: str
    ladder_id: str | None
    player_a_id: str | None
    player_b_id: str | None
    ladder_status: str | None
    winner_id: str | None
    comment: str | None


@dataclass(frozen=True)
class LadderMatch:
    """One challenge/result cycle between two players.

    Attributes:
        id: Match identifier (the booking id).
        player_a_id: Challenging player.
        player_b_id: Challenged player.
        booking_id: Booking holding the court slot.
        booking_start: Slot start, ISO-8601.
        booking_end: Slot end, ISO-8601.
        status: "planned" until a result is reported, then "completed".
        winner_id: Winner once completed.
        comment: Free-text note from the result report.
    """

    id: str
    player_a_id: str
    player_b_id: str
    booking_id: str | None = None
    booking_start: str | None = None
    booking_end: str | None = None
    status: LadderStatus = "planned"
    winner_id: str | None = None
    comment: str | None = None

    def opponent_of(self, player_id: str) -> str:
        """The other player in the match."""
        return self.player_b_id if player_id == self.player_a_id else self.player_a_id


class MatchUpdate(BaseModel):
    """Result fields to write onto a ladder match booking.

    Fields left unset keep their stored value; fields explicitly set to None
    are cleared.
    """

    ladder_status: LadderStatus | None = None
    winner_id: str | None = None
    comment: str | None = None


def booking_to_ladder_match(record: BookingRecord) -> LadderMatch | None:
    """Project a booking into a ladder match.

    Returns None for ordinary bookings, i.e. when either player id is missing.
    """
    if not record.player_a_id or not record.player_b_id:
        return None

    status: LadderStatus = "completed" if record.ladder_status == "completed" else "planned"
    return LadderMatch(
        id=record.id,
        player_a_id=record.player_a_id,
        player_b_id=record.player_b_id,
        booking_id=record.id,
        booking_start=record.start_date,
        booking_end=record.end_date,
        status=status,
        winner_id=record.winner_id,
        comment=record.comment,
    )


def _start_timestamp(match: LadderMatch) -> float:
    if not match.booking_start:
        return 0.0
    try:
        return datetime.fromisoformat(match.booking_start).timestamp()
    except ValueError:
        return 0.0


def build_ladder_matches(
    records: Iterable[BookingRecord], ladder_id: str | None = None
) -> list[LadderMatch]:
    """Ladder matches among the records, newest slot first.

    Args:
        records: Bookings of any kind.
        ladder_id: Keep only matches of this ladder when given.

    Returns:
        Matches sorted by start time, descending.
    """
    matches: list[LadderMatch] = []
    for record in records:
        if ladder_id and record.ladder_id != ladder_id:
            continue
        match = booking_to_ladder_match(record)
        if match is not None:
            matches.append(match)
    return sorted(matches, key=_start_timestamp, reverse=True)


def apply_match_update(match: LadderMatch, update: MatchUpdate) -> LadderMatch:
    """Local view of a match after writing ``update`` to its booking."""
    fields_set = update.model_fields_set
    return replace(
        match,
        status=update.ladder_status or match.status,
        winner_id=update.winner_id if "winner_id" in fields_set else match.winner_id,
        comment=update.comment if "comment" in fields_set else match.comment,
    )
