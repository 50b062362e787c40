"""Ladder workflows: standings, challenges, result reporting and cancellation."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime, timedelta

import structlog

from club_ladder.core.config import ClubConfig
from club_ladder.core.errors import (
    ChallengeRejectedError,
    MatchStateError,
    NoActiveLadderError,
    NotParticipantError,
    SlotUnavailableError,
)
from club_ladder.ladder import (
    LadderMatch,
    LadderPlayer,
    MatchUpdate,
    SessionUser,
    apply_ladder_result_with_stats,
    booking_to_ladder_match,
    build_ladder_matches,
    build_ladder_players,
    build_stats_updates,
    find_index,
    get_challenge_status,
    merge_ladder_order,
    roster_from_entries,
)
from club_ladder.models import Booking, Ladder, User
from club_ladder.services.storage import ClubStore
from club_ladder.services.storage.booking_repository import to_iso

logger = structlog.get_logger()


class LadderService:
    """Run ladder actions against the club store.

    Result reports are serialized per ladder so two reports cannot both read
    the same standings and double count a win.
    """

    def __init__(self, store: ClubStore, config: ClubConfig) -> None:
        self.store = store
        self.config = config
        self._fallback_roster = roster_from_entries(config.ladder.fallback_roster)
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._booking_lock = asyncio.Lock()

    async def resolve_ladder(self, ladder_id: str | None = None) -> Ladder:
        """Get the given ladder, or the active one when no id is given.

        Raises:
            NotFoundError: If ``ladder_id`` does not exist.
            NoActiveLadderError: If no id is given and no ladder is active.
        """
        if ladder_id:
            return await self.store.ladders.get_ladder(ladder_id)
        ladder = await self.store.ladders.get_active_ladder()
        if ladder is None:
            raise NoActiveLadderError()
        return ladder

    async def session_user(self, uid: str) -> SessionUser:
        """Identity of a stored user acting on the ladder."""
        user = await self.store.users.get_user(uid)
        return SessionUser(uid=user.uid, email=user.email, display_name=user.display_name)

    def _build_standings(
        self, ladder: Ladder, users: Sequence[User], session_user: SessionUser | None
    ) -> list[LadderPlayer]:
        base_players = build_ladder_players(
            users,
            session_user,
            ladder.participants,
            fallback_roster=self._fallback_roster,
            locale=self.config.ladder.collation_locale,
            fallback_name=self.config.ladder.fallback_player_name,
        )
        return merge_ladder_order(base_players, ladder.ranking)

    async def standings(
        self, ladder: Ladder, session_user: SessionUser | None = None
    ) -> list[LadderPlayer]:
        """Current ladder ordering, top rank first."""
        users = await self.store.users.get_users()
        return self._build_standings(ladder, users, session_user)

    async def join(self, uid: str, ladder_id: str | None = None) -> Ladder:
        """Opt a stored user into a ladder."""
        await self.store.users.get_user(uid)
        ladder = await self.resolve_ladder(ladder_id)
        return await self.store.ladders.join_ladder(ladder.id, uid)

    async def leave(self, uid: str, ladder_id: str | None = None) -> Ladder:
        """Remove a user from a ladder."""
        ladder = await self.resolve_ladder(ladder_id)
        return await self.store.ladders.leave_ladder(ladder.id, uid)

    async def challenge(
        self,
        challenger_id: str,
        opponent_id: str,
        start: datetime,
        end: datetime | None = None,
        ladder_id: str | None = None,
    ) -> LadderMatch:
        """Book a court slot for a challenge.

        Args:
            challenger_id: Player issuing the challenge; must have joined.
            opponent_id: Player being challenged.
            start: Slot start.
            end: Slot end; defaults to the configured slot length.
            ladder_id: Ladder to play in; defaults to the active one.

        Returns:
            The planned match.

        Raises:
            NotParticipantError: If the challenger has not joined the ladder.
            ChallengeRejectedError: If the ladder rules forbid the challenge.
            SlotUnavailableError: If the slot overlaps another booking.
        """
        ladder = await self.resolve_ladder(ladder_id)
        if challenger_id not in ladder.participants:
            raise NotParticipantError(challenger_id, ladder.name)

        session_user = await self.session_user(challenger_id)
        standings = await self.standings(ladder, session_user)
        status = get_challenge_status(
            standings,
            challenger_id,
            opponent_id,
            max_distance=self.config.ladder.max_challenge_distance,
        )
        if not status.eligible:
            logger.info(
                "challenge_rejected",
                challenger_id=challenger_id,
                opponent_id=opponent_id,
                reason=status.reason,
            )
            raise ChallengeRejectedError(str(status.reason), status.message or "")

        if end is None:
            end = start + timedelta(minutes=self.config.booking.slot_minutes)

        # Slots are shared by all ladders.
        async with self._booking_lock:
            if not await self.store.bookings.check_availability(start, end):
                raise SlotUnavailableError(to_iso(start), to_iso(end))

            booking = await self.store.bookings.create_booking(
                challenger_id,
                start,
                end,
                ladder_id=ladder.id,
                player_a_id=challenger_id,
                player_b_id=opponent_id,
                ladder_status="planned",
            )
        logger.info(
            "challenge_booked",
            ladder_id=ladder.id,
            booking_id=booking.id,
            challenger_id=challenger_id,
            opponent_id=opponent_id,
        )
        return self._require_match(booking)

    @staticmethod
    def _require_match(booking: Booking) -> LadderMatch:
        match = booking_to_ladder_match(booking)
        if match is None:
            msg = f"Booking '{booking.id}' is not a ladder match"
            raise MatchStateError(msg)
        return match

    async def report_result(
        self, booking_id: str, winner_id: str, comment: str | None = None
    ) -> list[LadderPlayer]:
        """Complete a planned match and update the ladder.

        Args:
            booking_id: Booking holding the match.
            winner_id: One of the match's two players.
            comment: Optional note stored on the match.

        Returns:
            The ladder ordering after the result.

        Raises:
            MatchStateError: If the booking is not a planned ladder match, the
                winner did not play in it, or either player has left the ladder.
        """
        booking = await self.store.bookings.get_booking(booking_id)
        ladder = await self.resolve_ladder(booking.ladder_id)

        async with self._locks[ladder.id]:
            match = self._require_match(await self.store.bookings.get_booking(booking_id))
            if match.status == "completed":
                msg = f"A result for match '{booking_id}' has already been reported"
                raise MatchStateError(msg)
            if winner_id not in (match.player_a_id, match.player_b_id):
                msg = f"Player '{winner_id}' did not play in match '{booking_id}'"
                raise MatchStateError(msg, "Pick one of the two players as winner.")

            loser_id = match.opponent_of(winner_id)
            ladder = await self.store.ladders.get_ladder(ladder.id)
            users = await self.store.users.get_users()
            standings = self._build_standings(ladder, users, None)
            for player_id in (match.player_a_id, match.player_b_id):
                if find_index(standings, player_id) == -1:
                    msg = f"Player '{player_id}' is no longer on {ladder.name}"
                    raise MatchStateError(msg, "Cancel the match or rejoin the ladder first.")

            updated = apply_ladder_result_with_stats(standings, winner_id, loser_id)
            await self.store.bookings.update_ladder_match(
                booking_id,
                MatchUpdate(
                    ladder_status="completed",
                    winner_id=winner_id,
                    comment=(comment or "").strip() or None,
                ),
            )
            await self.store.ladders.save_ranking(ladder.id, [player.id for player in updated])

            stats_updates = build_stats_updates(
                updated, [winner_id, loser_id], {user.uid for user in users}
            )
            await self.store.users.update_user_stats(stats_updates)

        logger.info(
            "result_reported",
            ladder_id=ladder.id,
            booking_id=booking_id,
            winner_id=winner_id,
            loser_id=loser_id,
        )
        return updated

    async def cancel_match(self, booking_id: str) -> None:
        """Cancel a planned match and free its court slot.

        Raises:
            MatchStateError: If the booking is not a planned ladder match.
        """
        match = self._require_match(await self.store.bookings.get_booking(booking_id))
        if match.status == "completed":
            msg = f"Match '{booking_id}' is already completed"
            raise MatchStateError(msg, "Completed matches stay on record.")
        await self.store.bookings.delete_booking(booking_id)
        logger.info("match_cancelled", booking_id=booking_id)

    async def matches(self, ladder_id: str | None = None) -> list[LadderMatch]:
        """Matches of a ladder, newest slot first."""
        ladder = await self.resolve_ladder(ladder_id)
        bookings = await self.store.bookings.get_bookings()
        return build_ladder_matches(bookings, ladder.id)
