"""Tests for the DuckDB-backed club store."""

from datetime import UTC, datetime, timedelta

import pytest

from club_ladder.core.config import StorageConfig
from club_ladder.core.errors import DuplicateUserError, NotFoundError
from club_ladder.ladder.matches import MatchUpdate
from club_ladder.ladder.results import StatsUpdate
from club_ladder.services.storage import ClubStore
from club_ladder.services.storage.booking_repository import to_iso

SLOT = datetime(2026, 5, 1, 18, 0, tzinfo=UTC)


@pytest.fixture
async def store(tmp_path):
    store = ClubStore(StorageConfig(database_path=str(tmp_path / "db" / "club.duckdb")))
    yield store
    await store.close()


class TestToIso:
    """Tests for timestamp normalization."""

    def test_naive_is_utc(self):
        """Test naive datetimes are treated as UTC."""
        assert to_iso(datetime(2026, 5, 1, 18, 0)) == "2026-05-01T18:00:00+00:00"

    def test_converts_offsets(self):
        """Test offsets are converted to UTC."""
        local = datetime.fromisoformat("2026-05-01T20:00:00+02:00")
        assert to_iso(local) == "2026-05-01T18:00:00+00:00"


class TestUserRepository:
    """Tests for user persistence."""

    async def test_create_and_get(self, store):
        """Test a created user can be read back."""
        await store.users.create_user("anna", "anna@example.com", "Anna")
        user = await store.users.get_user("anna")

        assert user.email == "anna@example.com"
        assert user.display_name == "Anna"
        assert user.ladder_wins is None

    async def test_create_duplicate_raises(self, store):
        """Test a taken uid is refused and the first profile kept."""
        await store.users.create_user("anna", "anna@example.com", "Anna")

        with pytest.raises(DuplicateUserError):
            await store.users.create_user("anna", "other@example.com", "Other")

        assert (await store.users.get_user("anna")).email == "anna@example.com"

    async def test_get_missing_raises(self, store):
        """Test reading an unknown user raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await store.users.get_user("ghost")

    async def test_update_stats(self, store):
        """Test counters are written for several users at once."""
        await store.users.create_user("anna", "anna@example.com")
        await store.users.create_user("bo", "bo@example.com")

        await store.users.update_user_stats(
            [
                StatsUpdate(uid="anna", ladder_wins=1, ladder_losses=0),
                StatsUpdate(uid="bo", ladder_wins=0, ladder_losses=1),
            ]
        )

        users = {user.uid: user for user in await store.users.get_users()}
        assert (users["anna"].ladder_wins, users["anna"].ladder_losses) == (1, 0)
        assert (users["bo"].ladder_wins, users["bo"].ladder_losses) == (0, 1)

    async def test_update_stats_unknown_user_writes_nothing(self, store):
        """Test an unknown uid aborts the whole batch."""
        await store.users.create_user("anna", "anna@example.com")

        with pytest.raises(NotFoundError):
            await store.users.update_user_stats(
                [
                    StatsUpdate(uid="anna", ladder_wins=5, ladder_losses=0),
                    StatsUpdate(uid="ghost", ladder_wins=0, ladder_losses=1),
                ]
            )

        assert (await store.users.get_user("anna")).ladder_wins is None


class TestBookingRepository:
    """Tests for booking persistence."""

    async def test_create_match_booking(self, store):
        """Test ladder fields are stored with the slot."""
        booking = await store.bookings.create_booking(
            "anna",
            SLOT,
            SLOT + timedelta(hours=1),
            ladder_id="l1",
            player_a_id="anna",
            player_b_id="bo",
            ladder_status="planned",
        )
        stored = await store.bookings.get_booking(booking.id)

        assert stored.start_date == "2026-05-01T18:00:00+00:00"
        assert stored.end_date == "2026-05-01T19:00:00+00:00"
        assert stored.player_b_id == "bo"
        assert stored.ladder_status == "planned"

    async def test_availability(self, store):
        """Test overlapping slots are unavailable and adjacent ones free."""
        await store.bookings.create_booking("anna", SLOT, SLOT + timedelta(hours=1))

        assert not await store.bookings.check_availability(
            SLOT + timedelta(minutes=30), SLOT + timedelta(minutes=90)
        )
        assert not await store.bookings.check_availability(
            SLOT - timedelta(minutes=30), SLOT + timedelta(minutes=30)
        )
        assert await store.bookings.check_availability(
            SLOT + timedelta(hours=1), SLOT + timedelta(hours=2)
        )
        assert await store.bookings.check_availability(SLOT - timedelta(hours=1), SLOT)

    async def test_update_ladder_match(self, store):
        """Test result fields are written and unset fields kept."""
        booking = await store.bookings.create_booking(
            "anna", SLOT, SLOT + timedelta(hours=1), player_a_id="anna", player_b_id="bo"
        )

        updated = await store.bookings.update_ladder_match(
            booking.id, MatchUpdate(ladder_status="completed", winner_id="bo", comment="close")
        )
        assert updated.ladder_status == "completed"
        assert updated.winner_id == "bo"

        cleared = await store.bookings.update_ladder_match(booking.id, MatchUpdate(comment=None))
        assert cleared.comment is None
        assert cleared.winner_id == "bo"
        assert cleared.ladder_status == "completed"

    async def test_update_missing_raises(self, store):
        """Test updating an unknown booking raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await store.bookings.update_ladder_match("ghost", MatchUpdate(winner_id="x"))

    async def test_delete(self, store):
        """Test deleted bookings are gone."""
        booking = await store.bookings.create_booking("anna", SLOT, SLOT + timedelta(hours=1))
        await store.bookings.delete_booking(booking.id)

        assert await store.bookings.get_bookings() == []
        with pytest.raises(NotFoundError):
            await store.bookings.delete_booking(booking.id)


class TestLadderRepository:
    """Tests for ladder persistence."""

    async def test_create_and_active(self, store):
        """Test a new ladder is active with no participants."""
        ladder = await store.ladders.create_ladder("Stegen 2026", 2026, "2026-01-01")
        active = await store.ladders.get_active_ladder()

        assert active is not None
        assert active.id == ladder.id
        assert active.participants == []
        assert active.ranking == []

    async def test_no_active_ladder(self, store):
        """Test None is returned when every ladder is archived."""
        ladder = await store.ladders.create_ladder("Stegen 2025", 2025, "2025-01-01")
        await store.ladders.archive_ladder(ladder.id)

        assert await store.ladders.get_active_ladder() is None
        assert [lad.status for lad in await store.ladders.get_ladders()] == ["archived"]

    async def test_join_and_leave(self, store):
        """Test joining is idempotent and leaving removes the participant."""
        ladder = await store.ladders.create_ladder("Stegen 2026", 2026, "2026-01-01")

        await store.ladders.join_ladder(ladder.id, "anna")
        await store.ladders.join_ladder(ladder.id, "bo")
        joined = await store.ladders.join_ladder(ladder.id, "anna")
        assert joined.participants == ["anna", "bo"]

        left = await store.ladders.leave_ladder(ladder.id, "anna")
        assert left.participants == ["bo"]
        assert (await store.ladders.get_ladder(ladder.id)).participants == ["bo"]

    async def test_save_ranking(self, store):
        """Test the ordering is persisted."""
        ladder = await store.ladders.create_ladder("Stegen 2026", 2026, "2026-01-01")
        await store.ladders.save_ranking(ladder.id, ["c", "a", "b"])

        assert (await store.ladders.get_ladder(ladder.id)).ranking == ["c", "a", "b"]

    async def test_missing_ladder_raises(self, store):
        """Test unknown ladder ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await store.ladders.join_ladder("ghost", "anna")
