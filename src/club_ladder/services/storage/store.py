"""Club storage: DuckDB engine setup and the repositories built on it."""

from __future__ import annotations

from pathlib import Path

import structlog
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel, create_engine

from club_ladder.core.config import StorageConfig
from club_ladder.models import Booking, Ladder, User  # noqa: F401  (register tables)

from .booking_repository import BookingRepository
from .ladder_repository import LadderRepository
from .user_repository import UserRepository

logger = structlog.get_logger()


class ClubStore:
    """One DuckDB file holding users, bookings and ladders.

    Tables are created on open; repositories share a single engine.
    """

    def __init__(self, config: StorageConfig) -> None:
        self.config = config
        self._db_path = Path(config.database_path)
        self._engine = None
        self._init_db()
        self.users = UserRepository(self._engine)
        self.bookings = BookingRepository(self._engine)
        self.ladders = LadderRepository(self._engine)

    def _init_db(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        db_url = f"duckdb:///{self._db_path}"
        self._engine = create_engine(db_url, poolclass=NullPool)
        SQLModel.metadata.create_all(self._engine)
        logger.debug("store_init", path=str(self._db_path))

    async def close(self) -> None:
        """Dispose of the database engine."""
        if self._engine:
            self._engine.dispose()
            self._engine = None
