"""Database persistence for ladder seasons."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import structlog
from sqlmodel import Session, col, select

from club_ladder.core.errors import NotFoundError
from club_ladder.models import Ladder

from .repository import AsyncRepository

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = structlog.get_logger()


class LadderRepository(AsyncRepository):
    """Persist and query ladder seasons."""

    def __init__(self, engine: Engine) -> None:
        super().__init__(engine)

    async def get_ladders(self) -> list[Ladder]:
        """Get all ladders, newest first."""

        def _get(session: Session) -> list[Ladder]:
            statement = select(Ladder).order_by(col(Ladder.created_at).desc())
            return list(session.exec(statement).all())

        return await self._run_session(_get)

    async def get_ladder(self, ladder_id: str) -> Ladder:
        """Get a single ladder.

        Raises:
            NotFoundError: If the ladder does not exist.
        """

        def _get(session: Session) -> Ladder:
            ladder = session.get(Ladder, ladder_id)
            if ladder is None:
                raise NotFoundError("Ladder", ladder_id)
            return ladder

        return await self._run_session(_get)

    async def get_active_ladder(self) -> Ladder | None:
        """Get the newest active ladder, if any."""

        def _get(session: Session) -> Ladder | None:
            statement = (
                select(Ladder)
                .where(Ladder.status == "active")
                .order_by(col(Ladder.created_at).desc())
            )
            return session.exec(statement).first()

        return await self._run_session(_get)

    async def create_ladder(self, name: str, year: int, start_date: str) -> Ladder:
        """Create an active ladder with no participants."""

        def _create(session: Session) -> Ladder:
            ladder = Ladder(name=name, year=year, start_date=start_date)
            return self._persist(session, ladder)

        ladder = await self._run_session(_create)
        logger.info("ladder_created", ladder_id=ladder.id, name=name)
        return ladder

    async def _modify(self, ladder_id: str, change: Callable[[Ladder], None]) -> Ladder:
        def _update(session: Session) -> Ladder:
            ladder = session.get(Ladder, ladder_id)
            if ladder is None:
                raise NotFoundError("Ladder", ladder_id)
            change(ladder)
            return self._persist(session, ladder)

        return await self._run_session(_update)

    async def join_ladder(self, ladder_id: str, uid: str) -> Ladder:
        """Add a participant; joining twice is a no-op."""

        def _join(ladder: Ladder) -> None:
            if uid not in ladder.participants:
                ladder.participants = [*ladder.participants, uid]

        ladder = await self._modify(ladder_id, _join)
        logger.info("ladder_joined", ladder_id=ladder_id, uid=uid)
        return ladder

    async def leave_ladder(self, ladder_id: str, uid: str) -> Ladder:
        """Remove a participant."""

        def _leave(ladder: Ladder) -> None:
            ladder.participants = [pid for pid in ladder.participants if pid != uid]

        ladder = await self._modify(ladder_id, _leave)
        logger.info("ladder_left", ladder_id=ladder_id, uid=uid)
        return ladder

    async def archive_ladder(self, ladder_id: str) -> Ladder:
        """Mark a ladder as archived."""

        def _archive(ladder: Ladder) -> None:
            ladder.status = "archived"

        ladder = await self._modify(ladder_id, _archive)
        logger.info("ladder_archived", ladder_id=ladder_id)
        return ladder

    async def save_ranking(self, ladder_id: str, player_ids: Sequence[str]) -> Ladder:
        """Persist the ladder ordering, top rank first."""

        def _save(ladder: Ladder) -> None:
            ladder.ranking = list(player_ids)

        return await self._modify(ladder_id, _save)
