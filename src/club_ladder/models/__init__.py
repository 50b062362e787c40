from club_ladder.models.booking import Booking
from club_ladder.models.ladder import Ladder
from club_ladder.models.user import User

__all__ = ["Booking", "Ladder", "User"]
