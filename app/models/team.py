from typing import Optional
from pydantic import BaseModel, Field


class Team(BaseModel):
    id: str = Field(..., alias="_id")
    name: str

    # Cache recalculado desde los rankings finalizados, nunca incremental
    total_points: int = 0

    class Config:
        populate_by_name = True


class Candidate(BaseModel):
    id: str = Field(..., alias="_id")
    name: str
    team_id: Optional[str] = None

    chest_number: Optional[str] = None

    class Config:
        populate_by_name = True
