"""
Servicio de Puntos - Convierte rankings finalizados en puntos de campeonato

Sistema de puntos (tabla individual, la única que usa el rollup en vivo):
- 1er lugar: 5 puntos
- 2do lugar: 3 puntos
- 3er lugar: 1 punto

La tabla de equipos (10/5/3) solo la usa el importador de resultados
históricos. Las dos tablas se mantienen separadas a propósito.

El total de cada equipo es un cache: siempre se recalcula completo desde
los ranks persistidos de los programas completed, nunca se incrementa.
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.program import Program
from app.models.participant import ProgramParticipant
from app.models.results import (
    FinalizedEntry,
    FinalizedProgram,
    PointsBreakdownEntry,
    RecalculationResult,
    TeamPoints,
)
from app.models.team import Candidate, Team
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.participant_repository import ParticipantRepository
from app.repositories.program_repository import ProgramRepository
from app.repositories.team_repository import TeamRepository

logger = logging.getLogger(__name__)


INDIVIDUAL_POINTS: dict[int, int] = {1: 5, 2: 3, 3: 1}
TEAM_POINTS: dict[int, int] = {1: 10, 2: 5, 3: 3}


class PointsServiceError(Exception):
    """Base exception for points service errors."""
    pass


class TeamNotFoundError(PointsServiceError):
    """Raised when the team does not exist."""
    pass


def points_table(participant_type: str = "individual") -> dict[int, int]:
    """Tabla de puntos para el modo de participación"""
    return TEAM_POINTS if participant_type == "team" else INDIVIDUAL_POINTS


def points_for_rank(rank: Optional[int], participant_type: str = "individual") -> int:
    """
    Puntos para una posición.

    Cualquier rank fuera de la tabla (o None) vale 0.
    """
    if rank is None:
        return 0
    return points_table(participant_type).get(rank, 0)


def build_finalized_program(
    program: Program,
    participants: list[ProgramParticipant],
    candidates: dict[str, Candidate],
    teams: dict[str, Team]
) -> FinalizedProgram:
    """Arma las entradas de un programa completed con su dueño resuelto"""
    entries = []

    for p in participants:
        candidate = candidates.get(p.candidate_id) if p.candidate_id else None
        team = teams.get(p.team_id) if p.team_id else None

        if program.participant_type == "team":
            name = team.name if team else "Unknown"
        else:
            name = candidate.name if candidate else "Unknown"

        entries.append(FinalizedEntry(
            participant_id=p.id,
            participant_name=name,
            rank=p.rank,
            team_id=p.team_id,
            candidate_team_id=candidate.team_id if candidate else None,
        ))

    return FinalizedProgram(
        id=program.id,
        name=program.name,
        participant_type=program.participant_type,
        entries=entries,
    )


def _belongs_to_team(entry: FinalizedEntry, participant_type: str, team_id: str) -> bool:
    if participant_type == "team":
        return entry.team_id == team_id
    return entry.candidate_team_id == team_id


def calculate_team_points(
    team: Team,
    finalized_programs: list[FinalizedProgram]
) -> TeamPoints:
    """
    Calcular los puntos de un equipo sobre todos los programas finalizados.

    - Entradas de equipo cuentan si team_id coincide
    - Entradas individuales cuentan si el candidato pertenece al equipo
    - Varios candidatos del mismo equipo en un programa suman por separado
    - Entradas con 0 puntos no aparecen en el breakdown

    Siempre usa la tabla individual, sin importar el modo del programa.
    """
    breakdown: list[PointsBreakdownEntry] = []

    for program in finalized_programs:
        for entry in program.entries:
            if entry.rank is None:
                continue
            if not _belongs_to_team(entry, program.participant_type, team.id):
                continue

            points = points_for_rank(entry.rank, "individual")
            if points <= 0:
                continue

            breakdown.append(PointsBreakdownEntry(
                program_id=program.id,
                program_name=program.name,
                rank=entry.rank,
                points=points,
                participant_name=entry.participant_name,
            ))

    # Mostrar primero los que más puntos dieron
    breakdown.sort(key=lambda b: b.points, reverse=True)

    return TeamPoints(
        team_id=team.id,
        team_name=team.name,
        total_points=sum(b.points for b in breakdown),
        breakdown=breakdown,
    )


class PointsService:
    """
    Servicio para calcular y persistir los puntos de los equipos.

    Solo lee ranks persistidos de programas completed; los programas live
    nunca suman puntos.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.program_repo = ProgramRepository(db)
        self.participant_repo = ParticipantRepository(db)
        self.team_repo = TeamRepository(db)
        self.candidate_repo = CandidateRepository(db)

    async def get_finalized_programs(self) -> list[FinalizedProgram]:
        """
        Cargar todos los programas completed con sus ranks persistidos.

        Resuelve el mapping candidato -> equipo para las entradas individuales.
        """
        programs = await self.program_repo.get_completed()
        if not programs:
            return []

        participants = await self.participant_repo.get_ranked_for_programs(
            [p.id for p in programs]
        )

        candidate_ids = {p.candidate_id for p in participants if p.candidate_id}
        team_ids = {p.team_id for p in participants if p.team_id}
        candidates = await self.candidate_repo.get_by_ids(list(candidate_ids))
        teams = await self.team_repo.get_by_ids(list(team_ids))

        by_program: dict[str, list[ProgramParticipant]] = {}
        for participant in participants:
            by_program.setdefault(participant.program_id, []).append(participant)

        return [
            build_finalized_program(program, by_program.get(program.id, []), candidates, teams)
            for program in programs
        ]

    async def get_team_points(self, team_id: str) -> TeamPoints:
        """Puntos y breakdown de un equipo. Lanza TeamNotFoundError si no existe."""
        team = await self.team_repo.get_by_id(team_id)
        if not team:
            raise TeamNotFoundError(f"Team {team_id} not found")

        finalized = await self.get_finalized_programs()
        return calculate_team_points(team, finalized)

    async def get_standings(self) -> list[TeamPoints]:
        """Clasificación general de equipos, ordenada por puntos (descendente)"""
        teams = await self.team_repo.get_all()
        finalized = await self.get_finalized_programs()

        standings = [calculate_team_points(team, finalized) for team in teams]
        standings.sort(key=lambda s: s.total_points, reverse=True)
        return standings

    async def recompute_all_team_totals(self) -> RecalculationResult:
        """
        Recalcular y persistir total_points de todos los equipos.

        Cada equipo se procesa aislado: si uno falla se loguea con su id y se
        sigue con los demás, incluso si el documento del equipo está malformado.
        La operación completa no falla por un equipo.
        """
        team_docs = await self.team_repo.get_all_docs()
        finalized = await self.get_finalized_programs()

        result = RecalculationResult()

        for doc in team_docs:
            team_id = str(doc.get("_id"))
            try:
                team = Team(**doc)
                points = calculate_team_points(team, finalized)
                await self.team_repo.update_total_points(team.id, points.total_points)
                result.updated[team.id] = points.total_points
            except Exception:
                logger.exception("Failed to recalculate points for team %s", team_id)
                result.failed.append(team_id)

        logger.info(
            "Team points recalculated: %d updated, %d failed",
            len(result.updated),
            len(result.failed)
        )
        return result
