"""
FinalizeService - Freezes a program's ranking.

Order of writes:
1. Persist rank + total_score on every participant (one bulk write)
2. Flip the program status to completed
3. Recompute every team's cached points

If the process dies between 1 and 2 the program is still live and
finalizing again simply overwrites the ranks.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from app.models.results import RankedResult, RecalculationResult
from app.repositories.participant_repository import ParticipantRepository
from app.repositories.program_repository import ProgramRepository
from app.services.points_service import PointsService
from app.services.ranking_service import RankingService, RankingServiceError

logger = logging.getLogger(__name__)


class ProgramAlreadyFinalizedError(RankingServiceError):
    """Raised when finalizing a program that is already completed."""
    pass


class FinalizeResult(BaseModel):
    program_id: str
    participants_ranked: int
    rankings: list[RankedResult]
    team_points: RecalculationResult


class FinalizeService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.ranking_service = RankingService(db)
        self.points_service = PointsService(db)
        self.program_repo = ProgramRepository(db)
        self.participant_repo = ParticipantRepository(db)

    async def finalize_program(self, program_id: str) -> FinalizeResult:
        """
        Compute the official ranking once and persist it.

        Raises:
            ProgramNotFoundError: the program does not exist
            ProgramAlreadyFinalizedError: the program is already completed
        """
        program = await self.ranking_service.get_program(program_id)
        if program.status == "completed":
            raise ProgramAlreadyFinalizedError(f"Program {program_id} is already finalized")

        rankings = await self.ranking_service.rank_program(program)

        matched = await self.participant_repo.save_rankings(rankings)
        await self.program_repo.update_status(program.id, "completed")
        logger.info("Program %s finalized with %d ranked participants", program.id, matched)

        team_points = await self.points_service.recompute_all_team_totals()

        return FinalizeResult(
            program_id=program.id,
            participants_ranked=matched,
            rankings=rankings,
            team_points=team_points,
        )
