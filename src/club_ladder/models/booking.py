import uuid
from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


class Booking(SQLModel, table=True):
    """A court slot; carries player ids when it hosts a ladder match."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str
    start_date: str
    end_date: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    ladder_id: str | None = None
    player_a_id: str | None = None
    player_b_id: str | None = None
    ladder_status: str | None = None
    winner_id: str | None = None
    comment: str | None = None
