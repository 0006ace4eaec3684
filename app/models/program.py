from typing import Literal, Optional
from pydantic import BaseModel, Field


ParticipantType = Literal["individual", "team"]
ProgramStatus = Literal["upcoming", "live", "completed"]


class Program(BaseModel):
    """Competencia (programa) con sus propias reglas, participantes y scores"""

    id: str = Field(..., alias="_id")
    name: str

    participant_type: ParticipantType = "individual"
    best_of_judge_count: Optional[int] = None  # None o <= 0: todos los jueces

    status: ProgramStatus = "upcoming"  # upcoming | live | completed

    max_score_per_judge: Optional[float] = None
    description: Optional[str] = None

    class Config:
        populate_by_name = True
