"""
Resultados derivados por el motor de ranking y puntos (no se persisten tal cual)
"""

from typing import Optional
from pydantic import BaseModel, Field

from app.models.program import ParticipantType


class RankedResult(BaseModel):
    """Puntaje agregado y posición de un participante en un programa"""

    participant_id: str
    display_name: str
    participant_no: Optional[str] = None

    score: float
    rank: int


class FinalizedEntry(BaseModel):
    """Participación con ranking persistido, lista para el rollup de equipos"""

    participant_id: str
    participant_name: str
    rank: Optional[int] = None

    team_id: Optional[str] = None  # dueño directo (modo team)
    candidate_team_id: Optional[str] = None  # dueño indirecto (modo individual)


class FinalizedProgram(BaseModel):
    id: str
    name: str
    participant_type: ParticipantType
    entries: list[FinalizedEntry] = []


class PointsBreakdownEntry(BaseModel):
    program_id: str
    program_name: str
    rank: int
    points: int
    participant_name: str


class TeamPoints(BaseModel):
    team_id: str
    team_name: str
    total_points: int = 0
    breakdown: list[PointsBreakdownEntry] = []


class RecalculationResult(BaseModel):
    """Resultado del recálculo masivo; los equipos fallidos solo se reportan"""

    updated: dict[str, int] = Field(default_factory=dict)
    failed: list[str] = Field(default_factory=list)
