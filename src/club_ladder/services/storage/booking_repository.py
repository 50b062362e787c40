"""Database persistence for court bookings and ladder match metadata."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog
from sqlmodel import Session, select

from club_ladder.core.errors import NotFoundError
from club_ladder.ladder.matches import LadderStatus, MatchUpdate
from club_ladder.models import Booking

from .repository import AsyncRepository

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = structlog.get_logger()


def to_iso(value: datetime) -> str:
    """Normalize a datetime to an ISO-8601 UTC string; naive values are UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def _parse(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def slots_overlap(booking: Booking, start: datetime, end: datetime) -> bool:
    """Whether a booking overlaps the half-open interval [start, end)."""
    return _parse(booking.start_date) < end and _parse(booking.end_date) > start


class BookingRepository(AsyncRepository):
    """Persist and query court bookings."""

    def __init__(self, engine: Engine) -> None:
        super().__init__(engine)

    async def get_bookings(self) -> list[Booking]:
        """Get all bookings, earliest slot first."""

        def _get(session: Session) -> list[Booking]:
            statement = select(Booking).order_by(Booking.start_date)
            return list(session.exec(statement).all())

        return await self._run_session(_get)

    async def get_booking(self, booking_id: str) -> Booking:
        """Get a single booking.

        Raises:
            NotFoundError: If the booking does not exist.
        """

        def _get(session: Session) -> Booking:
            booking = session.get(Booking, booking_id)
            if booking is None:
                raise NotFoundError("Booking", booking_id)
            return booking

        return await self._run_session(_get)

    async def check_availability(self, start: datetime, end: datetime) -> bool:
        """Check that no booking overlaps the requested slot."""
        start = _parse(to_iso(start))
        end = _parse(to_iso(end))
        bookings = await self.get_bookings()
        return not any(slots_overlap(booking, start, end) for booking in bookings)

    async def create_booking(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
        *,
        ladder_id: str | None = None,
        player_a_id: str | None = None,
        player_b_id: str | None = None,
        ladder_status: LadderStatus | None = None,
    ) -> Booking:
        """Create a booking, optionally carrying ladder match fields."""

        def _create(session: Session) -> Booking:
            booking = Booking(
                user_id=user_id,
                start_date=to_iso(start),
                end_date=to_iso(end),
                ladder_id=ladder_id,
                player_a_id=player_a_id,
                player_b_id=player_b_id,
                ladder_status=ladder_status,
            )
            return self._persist(session, booking)

        booking = await self._run_session(_create)
        logger.info("booking_created", booking_id=booking.id, start=booking.start_date)
        return booking

    async def update_ladder_match(self, booking_id: str, update: MatchUpdate) -> Booking:
        """Write result fields onto a booking.

        Unset fields are left alone; fields explicitly set to None are cleared.

        Raises:
            NotFoundError: If the booking does not exist.
        """
        fields_set = update.model_fields_set

        def _update(session: Session) -> Booking:
            booking = session.get(Booking, booking_id)
            if booking is None:
                raise NotFoundError("Booking", booking_id)
            if update.ladder_status:
                booking.ladder_status = update.ladder_status
            if "winner_id" in fields_set:
                booking.winner_id = update.winner_id
            if "comment" in fields_set:
                booking.comment = update.comment
            return self._persist(session, booking)

        return await self._run_session(_update)

    async def delete_booking(self, booking_id: str) -> None:
        """Delete a booking.

        Raises:
            NotFoundError: If the booking does not exist.
        """

        def _delete(session: Session) -> None:
            booking = session.get(Booking, booking_id)
            if booking is None:
                raise NotFoundError("Booking", booking_id)
            session.delete(booking)
            session.commit()

        await self._run_session(_delete)
        logger.info("booking_deleted", booking_id=booking_id)
