from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    """A club member profile with season ladder counters."""

    uid: str = Field(primary_key=True)
    email: str = ""
    display_name: str | None = None
    phone: str | None = None
    role: str | None = None
    ladder_wins: int | None = None
    ladder_losses: int | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
