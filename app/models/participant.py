from typing import Optional
from pydantic import BaseModel, Field


class ProgramParticipant(BaseModel):
    """Una entrada compitiendo en un programa (candidato o equipo)"""

    id: str = Field(..., alias="_id")
    program_id: str

    candidate_id: Optional[str] = None  # individual, o líder del equipo
    team_id: Optional[str] = None  # entradas de equipo
    participant_no: Optional[str] = None

    # Solo se llenan al finalizar el programa
    rank: Optional[int] = None
    total_score: Optional[float] = None

    class Config:
        populate_by_name = True
