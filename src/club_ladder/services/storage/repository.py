"""Base class for repositories backed by the club database."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from sqlmodel import Session, SQLModel

if TYPE_CHECKING:
    from sqlalchemy import Engine

T = TypeVar("T")
R = TypeVar("R", bound=SQLModel)


class AsyncRepository:
    """Run blocking DuckDB session work off the event loop.

    Every call opens its own session, so a callback either commits all of its
    writes or none of them.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    async def _run_session(self, fn: Callable[[Session], T]) -> T:
        def _run() -> T:
            with Session(self._engine) as session:
                return fn(session)

        return await asyncio.to_thread(_run)

    @staticmethod
    def _persist(session: Session, record: R) -> R:
        """Commit one record and reload it so it stays usable after the session closes."""
        session.add(record)
        session.commit()
        session.refresh(record)
        return record
