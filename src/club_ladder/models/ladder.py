import uuid
from datetime import UTC, datetime

from sqlalchemy import Column
from sqlmodel import JSON, Field, SQLModel


class Ladder(SQLModel, table=True):
    """A ladder season and its opted-in participants."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str
    year: int
    start_date: str
    status: str = "active"
    participants: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    ranking: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
