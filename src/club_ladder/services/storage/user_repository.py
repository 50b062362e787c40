"""Database persistence for club users and their ladder counters."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog
from sqlmodel import Session, col, select

from club_ladder.core.errors import DuplicateUserError, NotFoundError
from club_ladder.ladder.results import StatsUpdate
from club_ladder.models import User

from .repository import AsyncRepository

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = structlog.get_logger()


class UserRepository(AsyncRepository):
    """Persist and query club users."""

    def __init__(self, engine: Engine) -> None:
        super().__init__(engine)

    async def get_users(self) -> list[User]:
        """Get all users in creation order."""

        def _get(session: Session) -> list[User]:
            statement = select(User).order_by(col(User.created_at))
            return list(session.exec(statement).all())

        return await self._run_session(_get)

    async def get_user(self, uid: str) -> User:
        """Get a single user.

        Raises:
            NotFoundError: If no user has this uid.
        """

        def _get(session: Session) -> User:
            user = session.get(User, uid)
            if user is None:
                raise NotFoundError("User", uid)
            return user

        return await self._run_session(_get)

    async def create_user(self, uid: str, email: str, display_name: str | None = None) -> User:
        """Create a user profile.

        Raises:
            DuplicateUserError: If the uid is already taken.
        """

        def _create(session: Session) -> User:
            if session.get(User, uid) is not None:
                raise DuplicateUserError(uid)
            user = User(uid=uid, email=email, display_name=display_name or None)
            return self._persist(session, user)

        user = await self._run_session(_create)
        logger.info("user_created", uid=uid)
        return user

    async def update_user_stats(self, updates: Sequence[StatsUpdate]) -> None:
        """Write win/loss counters for several users in one transaction.

        Raises:
            NotFoundError: If any user is unknown; nothing is written then.
        """
        if not updates:
            return

        def _update(session: Session) -> None:
            for update in updates:
                user = session.get(User, update.uid)
                if user is None:
                    raise NotFoundError("User", update.uid)
                user.ladder_wins = update.ladder_wins
                user.ladder_losses = update.ladder_losses
                session.add(user)
            session.commit()

        await self._run_session(_update)
        logger.debug("user_stats_updated", uids=[update.uid for update in updates])
