from .program import Program
from .participant import ProgramParticipant
from .score import ScoreRecord
from .team import Team, Candidate
from .results import (
    RankedResult,
    FinalizedEntry,
    FinalizedProgram,
    PointsBreakdownEntry,
    TeamPoints,
    RecalculationResult,
)
from .leaderboard import LeaderboardEntry, ProgramLeaderboard, ScoreMatrix, ScoreMatrixRow

__all__ = [
    "Program",
    "ProgramParticipant",
    "ScoreRecord",
    "Team",
    "Candidate",
    "RankedResult",
    "FinalizedEntry",
    "FinalizedProgram",
    "PointsBreakdownEntry",
    "TeamPoints",
    "RecalculationResult",
    "LeaderboardEntry",
    "ProgramLeaderboard",
    "ScoreMatrix",
    "ScoreMatrixRow",
]
