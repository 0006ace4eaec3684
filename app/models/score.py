from pydantic import BaseModel


class ScoreRecord(BaseModel):
    """Puntaje de un juez para una regla de un participante"""

    program_id: str
    participant_id: str
    judge_id: str
    rule_id: str

    score_value: float

    class Config:
        populate_by_name = True
