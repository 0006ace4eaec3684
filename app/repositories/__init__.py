from .program_repository import ProgramRepository
from .participant_repository import ParticipantRepository
from .score_repository import ScoreRepository
from .team_repository import TeamRepository
from .candidate_repository import CandidateRepository

__all__ = [
    "ProgramRepository",
    "ParticipantRepository",
    "ScoreRepository",
    "TeamRepository",
    "CandidateRepository",
]
