"""Tests for ladder match projection."""

from club_ladder.ladder.matches import (
    LadderMatch,
    MatchUpdate,
    apply_match_update,
    booking_to_ladder_match,
    build_ladder_matches,
)
from club_ladder.models import Booking


def make_booking(booking_id: str = "b1", **fields) -> Booking:
    defaults = {
        "user_id": "x",
        "start_date": "2026-05-01T18:00:00+00:00",
        "end_date": "2026-05-01T19:00:00+00:00",
    }
    defaults.update(fields)
    return Booking(id=booking_id, **defaults)


class TestBookingToLadderMatch:
    """Tests for booking_to_ladder_match."""

    def test_defaults_status_to_planned(self):
        """Test a booking with players but no status is a planned match."""
        match = booking_to_ladder_match(make_booking(player_a_id="x", player_b_id="y"))

        assert match == LadderMatch(
            id="b1",
            player_a_id="x",
            player_b_id="y",
            booking_id="b1",
            booking_start="2026-05-01T18:00:00+00:00",
            booking_end="2026-05-01T19:00:00+00:00",
            status="planned",
        )

    def test_copies_result_fields(self):
        """Test winner, comment and status are carried over."""
        booking = make_booking(
            player_a_id="x",
            player_b_id="y",
            ladder_status="completed",
            winner_id="y",
            comment="6-4 6-2",
        )
        match = booking_to_ladder_match(booking)

        assert match is not None
        assert match.status == "completed"
        assert match.winner_id == "y"
        assert match.comment == "6-4 6-2"

    def test_ordinary_booking_is_not_a_match(self):
        """Test bookings without both players project to None."""
        assert booking_to_ladder_match(make_booking()) is None
        assert booking_to_ladder_match(make_booking(player_a_id="x")) is None
        assert booking_to_ladder_match(make_booking(player_b_id="y")) is None
        assert booking_to_ladder_match(make_booking(player_a_id="", player_b_id="y")) is None

    def test_opponent_of(self):
        """Test the other player is resolved from either side."""
        match = LadderMatch(id="m", player_a_id="x", player_b_id="y")

        assert match.opponent_of("x") == "y"
        assert match.opponent_of("y") == "x"


class TestBuildLadderMatches:
    """Tests for build_ladder_matches."""

    def test_filters_and_sorts_newest_first(self):
        """Test ordinary bookings are dropped and matches sorted by start descending."""
        bookings = [
            make_booking(
                "old", player_a_id="a", player_b_id="b", start_date="2026-04-01T10:00:00+00:00"
            ),
            make_booking("plain"),
            make_booking(
                "new", player_a_id="c", player_b_id="d", start_date="2026-06-01T10:00:00+00:00"
            ),
            make_booking(
                "mid", player_a_id="a", player_b_id="c", start_date="2026-05-01T10:00:00+00:00"
            ),
        ]

        assert [m.id for m in build_ladder_matches(bookings)] == ["new", "mid", "old"]

    def test_filters_by_ladder(self):
        """Test only the requested ladder's matches are kept."""
        bookings = [
            make_booking("one", ladder_id="l1", player_a_id="a", player_b_id="b"),
            make_booking("two", ladder_id="l2", player_a_id="a", player_b_id="b"),
        ]

        assert [m.id for m in build_ladder_matches(bookings, "l2")] == ["two"]
        assert len(build_ladder_matches(bookings)) == 2

    def test_unparseable_start_sorts_last(self):
        """Test a bad timestamp does not break sorting."""
        bookings = [
            make_booking("bad", player_a_id="a", player_b_id="b", start_date="soon"),
            make_booking("good", player_a_id="a", player_b_id="b"),
        ]

        assert [m.id for m in build_ladder_matches(bookings)] == ["good", "bad"]


class TestApplyMatchUpdate:
    """Tests for apply_match_update."""

    def test_sets_result(self):
        """Test a completed result is reflected locally."""
        match = LadderMatch(id="m", player_a_id="x", player_b_id="y", comment="bring balls")
        updated = apply_match_update(match, MatchUpdate(ladder_status="completed", winner_id="x"))

        assert updated.status == "completed"
        assert updated.winner_id == "x"
        assert updated.comment == "bring balls"

    def test_explicit_none_clears(self):
        """Test explicitly clearing the winner and comment."""
        match = LadderMatch(
            id="m",
            player_a_id="x",
            player_b_id="y",
            status="completed",
            winner_id="x",
            comment="note",
        )
        updated = apply_match_update(match, MatchUpdate(winner_id=None, comment=None))

        assert updated.status == "completed"
        assert updated.winner_id is None
        assert updated.comment is None
