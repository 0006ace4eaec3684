"""
ResultsImportService - Carga resultados históricos (podios) ya parseados.

Por cada fila:
1. Busca o crea el programa (queda completed)
2. Busca o crea el equipo
3. Busca o crea el candidato dentro del equipo
4. Inscribe al participante y persiste rank + total_score

Es el único camino autorizado a usar la tabla de equipos (10/5/3) para
programas de equipo; el rollup de puntos siempre usa la individual.
"""

import logging
from typing import Optional, Union

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.program import Program
from app.models.results import RecalculationResult
from app.models.team import Team
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.participant_repository import ParticipantRepository
from app.repositories.program_repository import ProgramRepository
from app.repositories.team_repository import TeamRepository
from app.schemas.import_results import ImportCounts, ImportRow
from app.services.points_service import PointsService, points_for_rank

logger = logging.getLogger(__name__)


POSITION_ALIASES: dict[int, tuple[str, ...]] = {
    1: ("1", "1st", "i", "first"),
    2: ("2", "2nd", "ii", "second"),
    3: ("3", "3rd", "iii", "third"),
}


def parse_position(position: Union[str, int, None]) -> Optional[int]:
    """
    Normalizar una posición de podio.

    "1", "I", "First", "1st place" -> 1. Cualquier otra cosa -> None.
    """
    if position is None:
        return None

    words = str(position).strip().lower().replace(".", " ").split()
    if not words:
        return None

    for rank, aliases in POSITION_ALIASES.items():
        if words[0] in aliases:
            return rank
    return None


def is_group_program(program_type: Optional[str]) -> bool:
    if not program_type:
        return False
    value = program_type.strip().lower()
    return "group" in value or "team" in value


class ResultsImportService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.program_repo = ProgramRepository(db)
        self.team_repo = TeamRepository(db)
        self.candidate_repo = CandidateRepository(db)
        self.participant_repo = ParticipantRepository(db)
        self.points_service = PointsService(db)

    async def _get_or_create_program(self, row: ImportRow, counts: ImportCounts) -> Program:
        name = row.program_name.strip()
        program = await self.program_repo.get_by_name(name)
        if program:
            return program

        group = is_group_program(row.program_type)
        counts.programs += 1
        return await self.program_repo.create(
            name=name,
            participant_type="team" if group else "individual",
            status="completed",
            max_score_per_judge=10 if group else 5,
        )

    async def _get_or_create_team(self, name: str, counts: ImportCounts) -> Team:
        team = await self.team_repo.get_by_name(name)
        if team:
            return team

        counts.teams += 1
        return await self.team_repo.create(name)

    async def import_row(self, row: ImportRow, counts: ImportCounts) -> bool:
        """Importa una fila. Retorna False si la fila se descarta."""
        program_name = row.program_name.strip()
        team_name = (row.team_name or "").strip()
        candidate_name = (row.candidate_name or "").strip()

        rank = parse_position(row.position)
        if not program_name or not team_name or rank is None:
            return False

        program = await self._get_or_create_program(row, counts)
        if program.participant_type == "individual" and not candidate_name:
            return False

        team = await self._get_or_create_team(team_name, counts)

        candidate_id = None
        if candidate_name:
            candidate = await self.candidate_repo.get_in_team_by_name(team.id, candidate_name)
            if not candidate:
                candidate = await self.candidate_repo.create(candidate_name, team.id)
                counts.candidates += 1
            candidate_id = candidate.id

        if candidate_id:
            participant = await self.participant_repo.get_for_candidate(program.id, candidate_id)
        else:
            participant = await self.participant_repo.get_for_team(program.id, team.id)

        if not participant:
            # team_id explícito para que las entradas de equipo se atribuyan
            participant = await self.participant_repo.create(
                program_id=program.id,
                candidate_id=candidate_id,
                team_id=team.id,
            )
            counts.participants += 1

        points = points_for_rank(rank, program.participant_type)
        await self.participant_repo.update_result(participant.id, rank, float(points))

        if program.status != "completed":
            await self.program_repo.update_status(program.id, "completed")

        return True

    async def import_results(
        self,
        rows: list[ImportRow]
    ) -> tuple[ImportCounts, RecalculationResult]:
        """
        Importa todas las filas y recalcula los puntos de los equipos.

        Las filas inválidas (sin programa, sin equipo o posición fuera del
        podio) se cuentan como descartadas.
        """
        counts = ImportCounts()

        for row in rows:
            if await self.import_row(row, counts):
                counts.rows_imported += 1
            else:
                counts.rows_skipped += 1

        logger.info(
            "Imported %d result rows (%d skipped)",
            counts.rows_imported,
            counts.rows_skipped
        )

        team_points = await self.points_service.recompute_all_team_totals()
        return counts, team_points
