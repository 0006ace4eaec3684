from typing import Optional, Union
from pydantic import BaseModel


class ImportRow(BaseModel):
    """Fila ya parseada de resultados históricos"""
    program_name: str
    position: Union[str, int]  # "1", "I", "First", 2, ...
    candidate_name: Optional[str] = None
    team_name: Optional[str] = None
    program_type: Optional[str] = None  # "individual" | "group" | "team"


class ImportCounts(BaseModel):
    programs: int = 0
    teams: int = 0
    candidates: int = 0
    participants: int = 0
    rows_imported: int = 0
    rows_skipped: int = 0
