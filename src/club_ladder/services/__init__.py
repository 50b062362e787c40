"""Services for Club Ladder: storage and ladder workflows."""

from club_ladder.services.ladder_service import LadderService
from club_ladder.services.storage import ClubStore

__all__ = ["ClubStore", "LadderService"]
