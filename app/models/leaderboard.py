from typing import Optional
from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    """Entrada en la tabla de un programa (en vivo o finalizada)"""

    participant_id: str
    display_name: str
    participant_no: Optional[str] = None

    score: float
    rank: Optional[int] = None
    points: int = 0


class ProgramLeaderboard(BaseModel):
    program_id: str
    program_name: str
    status: str
    provisional: bool  # True mientras el programa no esté completed

    entries: list[LeaderboardEntry] = []


class ScoreMatrixRow(BaseModel):
    """Fila de la matriz de admin: total por juez + puntaje final"""

    participant_id: str
    display_name: str
    participant_no: Optional[str] = None

    judge_totals: dict[str, float] = {}
    score: float
    rank: Optional[int] = None


class ScoreMatrix(BaseModel):
    program_id: str
    status: str
    best_of_judge_count: Optional[int] = None

    judge_ids: list[str] = []
    rows: list[ScoreMatrixRow] = []
