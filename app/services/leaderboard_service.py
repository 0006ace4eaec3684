"""
LeaderboardService - Serves a program's leaderboard.

Live (and upcoming) programs are recomputed from the current scores on every
request, so every poll is an independent snapshot. Completed programs are
served from the persisted ranks and never recomputed.
"""

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.leaderboard import LeaderboardEntry, ProgramLeaderboard
from app.models.program import Program
from app.repositories.participant_repository import ParticipantRepository
from app.services.points_service import points_for_rank
from app.services.ranking_service import RankingService


class LeaderboardService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.ranking_service = RankingService(db)
        self.participant_repo = ParticipantRepository(db)

    async def _live_entries(self, program: Program) -> list[LeaderboardEntry]:
        rankings = await self.ranking_service.rank_program(program)

        return [
            LeaderboardEntry(
                participant_id=r.participant_id,
                display_name=r.display_name,
                participant_no=r.participant_no,
                score=r.score,
                rank=r.rank,
                points=points_for_rank(r.rank),
            )
            for r in rankings
        ]

    async def _final_entries(self, program: Program) -> list[LeaderboardEntry]:
        participants = await self.participant_repo.get_by_program(program.id)
        if not participants:
            return []

        names = await self.ranking_service.resolve_names(program, participants)

        # Unranked rows go last
        participants.sort(key=lambda p: p.rank if p.rank is not None else float("inf"))

        return [
            LeaderboardEntry(
                participant_id=p.id,
                display_name=names[p.id],
                participant_no=p.participant_no,
                score=p.total_score or 0.0,
                rank=p.rank,
                points=points_for_rank(p.rank),
            )
            for p in participants
        ]

    async def get_program_leaderboard(self, program_id: str) -> ProgramLeaderboard:
        """
        Get the leaderboard for a program.

        Raises ProgramNotFoundError if the program does not exist.
        """
        program = await self.ranking_service.get_program(program_id)
        provisional = program.status != "completed"

        if provisional:
            entries = await self._live_entries(program)
        else:
            entries = await self._final_entries(program)

        return ProgramLeaderboard(
            program_id=program.id,
            program_name=program.name,
            status=program.status,
            provisional=provisional,
            entries=entries,
        )
