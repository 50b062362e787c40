from .booking_repository import BookingRepository
from .ladder_repository import LadderRepository
from .store import ClubStore
from .user_repository import UserRepository

__all__ = ["BookingRepository", "ClubStore", "LadderRepository", "UserRepository"]
