"""
RankingService - Aggregates judge scores into one ranked score per participant.

Every surface that shows a program ranking (projected standings, live
leaderboard, admin matrix, finalize) goes through `aggregate`; nothing else
re-implements the judge grouping or the best-of-N average.

Algorithm:
1. Sum each judge's rule scores per participant (judge total)
2. Keep the best `best_of_judge_count` judge totals (all if not set)
3. Score = average of the kept totals rounded to 2 decimals (0 when nobody scored)
4. Dense ranking: equal scores share a rank, the next score takes the next rank
"""

from collections import defaultdict
from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.leaderboard import ScoreMatrix, ScoreMatrixRow
from app.models.participant import ProgramParticipant
from app.models.program import Program
from app.models.results import RankedResult
from app.models.score import ScoreRecord
from app.models.team import Candidate, Team
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.participant_repository import ParticipantRepository
from app.repositories.program_repository import ProgramRepository
from app.repositories.score_repository import ScoreRepository
from app.repositories.team_repository import TeamRepository


UNKNOWN_NAME = "Unknown"


class RankingServiceError(Exception):
    """Base exception for ranking service errors."""
    pass


class ProgramNotFoundError(RankingServiceError):
    """Raised when the program does not exist."""
    pass


# ============================================
# PURE AGGREGATION
# ============================================

def judge_totals(score_rows: Iterable[ScoreRecord]) -> dict[str, dict[str, float]]:
    """Group rows by participant then judge, summing values across rules."""
    totals: dict[str, dict[str, float]] = defaultdict(lambda: defaultdict(float))

    for row in score_rows:
        totals[row.participant_id][row.judge_id] += row.score_value

    return {pid: dict(judges) for pid, judges in totals.items()}


def best_of_average(
    totals: Iterable[float],
    best_of_judge_count: Optional[int] = None
) -> float:
    """Average of the highest `best_of_judge_count` judge totals."""
    ordered = sorted(totals, reverse=True)

    if best_of_judge_count is not None and best_of_judge_count > 0:
        ordered = ordered[:best_of_judge_count]

    if not ordered:
        return 0.0

    return sum(ordered) / len(ordered)


def assign_dense_ranks(results: list[RankedResult]) -> list[RankedResult]:
    """
    Sort by score descending and assign dense ranks with ties.

    [10, 8, 8, 5] -> [1, 2, 2, 3]. Exact ties keep their input order
    (sorted() is stable, also with reverse=True).
    """
    ordered = sorted(results, key=lambda r: r.score, reverse=True)

    rank = 0
    previous_score: Optional[float] = None
    for result in ordered:
        if previous_score is None or result.score != previous_score:
            rank += 1
            previous_score = result.score
        result.rank = rank

    return ordered


def aggregate(
    participants: list[ProgramParticipant],
    score_rows: Iterable[ScoreRecord],
    best_of_judge_count: Optional[int] = None,
    names: Optional[dict[str, str]] = None
) -> list[RankedResult]:
    """
    Rank every participant of one program from its raw score rows.

    Rows for participants that are not in `participants` are ignored and
    participants nobody scored are kept with score 0. Scores are rounded to 2
    decimals before ranking, the same value that gets persisted on finalize.
    """
    names = names or {}
    totals = judge_totals(score_rows)

    results = [
        RankedResult(
            participant_id=p.id,
            display_name=names.get(p.id, UNKNOWN_NAME),
            participant_no=p.participant_no,
            score=round(best_of_average(totals.get(p.id, {}).values(), best_of_judge_count), 2),
            rank=0,
        )
        for p in participants
    ]

    return assign_dense_ranks(results)


def display_name(
    participant: ProgramParticipant,
    participant_type: str,
    candidates: dict[str, Candidate],
    teams: dict[str, Team]
) -> str:
    """Candidate name for individual entries, 'Team (Lead)' for team entries."""
    candidate = candidates.get(participant.candidate_id) if participant.candidate_id else None

    if participant_type == "individual":
        return candidate.name if candidate else UNKNOWN_NAME

    team = teams.get(participant.team_id) if participant.team_id else None
    if not team:
        return UNKNOWN_NAME
    if candidate:
        return f"{team.name} ({candidate.name})"
    return team.name


# ============================================
# SERVICE
# ============================================

class RankingService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.program_repo = ProgramRepository(db)
        self.participant_repo = ParticipantRepository(db)
        self.score_repo = ScoreRepository(db)
        self.team_repo = TeamRepository(db)
        self.candidate_repo = CandidateRepository(db)

    async def get_program(self, program_id: str) -> Program:
        program = await self.program_repo.get_by_id(program_id)
        if not program:
            raise ProgramNotFoundError(f"Program {program_id} not found")
        return program

    async def resolve_names(
        self,
        program: Program,
        participants: list[ProgramParticipant]
    ) -> dict[str, str]:
        """Display name per participant id."""
        candidate_ids = {p.candidate_id for p in participants if p.candidate_id}
        team_ids = {p.team_id for p in participants if p.team_id}

        candidates = await self.candidate_repo.get_by_ids(list(candidate_ids))
        teams = await self.team_repo.get_by_ids(list(team_ids)) if program.participant_type == "team" else {}

        return {
            p.id: display_name(p, program.participant_type, candidates, teams)
            for p in participants
        }

    async def rank_program(
        self,
        program: Program,
        participants: Optional[list[ProgramParticipant]] = None
    ) -> list[RankedResult]:
        """Recompute the ranking of an already loaded program from its scores."""
        if participants is None:
            participants = await self.participant_repo.get_by_program(program.id)
        if not participants:
            return []

        names = await self.resolve_names(program, participants)
        scores = await self.score_repo.get_by_program(program.id)

        return aggregate(participants, scores, program.best_of_judge_count, names)

    async def calculate_program_rankings(self, program_id: str) -> list[RankedResult]:
        """
        Projected standings for a program, recomputed from current scores.

        Raises ProgramNotFoundError if the program does not exist.
        """
        program = await self.get_program(program_id)
        return await self.rank_program(program)

    async def get_score_matrix(self, program_id: str) -> ScoreMatrix:
        """
        Admin matrix: each participant's total per judge plus the final score.

        Completed programs report the persisted rank and total.
        """
        program = await self.get_program(program_id)
        participants = await self.participant_repo.get_by_program(program.id)
        scores = await self.score_repo.get_by_program(program.id)

        names = await self.resolve_names(program, participants) if participants else {}
        totals = judge_totals(scores)

        judge_ids: list[str] = []
        for row in scores:
            if row.judge_id not in judge_ids:
                judge_ids.append(row.judge_id)

        if program.status == "completed":
            ordered = sorted(
                participants,
                key=lambda p: p.rank if p.rank is not None else float("inf")
            )
            rows = [
                ScoreMatrixRow(
                    participant_id=p.id,
                    display_name=names.get(p.id, UNKNOWN_NAME),
                    participant_no=p.participant_no,
                    judge_totals=totals.get(p.id, {}),
                    score=p.total_score or 0.0,
                    rank=p.rank,
                )
                for p in ordered
            ]
        else:
            ranked = aggregate(participants, scores, program.best_of_judge_count, names)
            rows = [
                ScoreMatrixRow(
                    participant_id=r.participant_id,
                    display_name=r.display_name,
                    participant_no=r.participant_no,
                    judge_totals=totals.get(r.participant_id, {}),
                    score=r.score,
                    rank=r.rank,
                )
                for r in ranked
            ]

        return ScoreMatrix(
            program_id=program.id,
            status=program.status,
            best_of_judge_count=program.best_of_judge_count,
            judge_ids=judge_ids,
            rows=rows,
        )
