"""
Controlador de programas - Rankings, leaderboard, matriz de scores y finalize
"""

from fastapi import APIRouter, HTTPException, status

from app.core.dependencies import Database
from app.models.leaderboard import ProgramLeaderboard, ScoreMatrix
from app.models.results import RankedResult
from app.services.finalize_service import (
    FinalizeResult,
    FinalizeService,
    ProgramAlreadyFinalizedError,
)
from app.services.leaderboard_service import LeaderboardService
from app.services.ranking_service import ProgramNotFoundError, RankingService


router = APIRouter(prefix="/programs", tags=["programs"])


@router.get("/{program_id}/rankings", response_model=list[RankedResult])
async def get_projected_standings(program_id: str, db: Database):
    """
    Posiciones proyectadas, recalculadas desde los scores actuales.

    No son oficiales mientras el programa no esté completed.
    """
    ranking_service = RankingService(db)
    try:
        return await ranking_service.calculate_program_rankings(program_id)
    except ProgramNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{program_id}/leaderboard", response_model=ProgramLeaderboard)
async def get_program_leaderboard(program_id: str, db: Database):
    """
    Leaderboard público de un programa.

    En vivo se recalcula en cada request (polling); finalizado usa los ranks persistidos.
    """
    leaderboard_service = LeaderboardService(db)
    try:
        return await leaderboard_service.get_program_leaderboard(program_id)
    except ProgramNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{program_id}/matrix", response_model=ScoreMatrix)
async def get_score_matrix(program_id: str, db: Database):
    """Matriz de admin: total por juez y puntaje final de cada participante."""
    ranking_service = RankingService(db)
    try:
        return await ranking_service.get_score_matrix(program_id)
    except ProgramNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/{program_id}/finalize", response_model=FinalizeResult)
async def finalize_program(program_id: str, db: Database):
    """
    Finalizar un programa: persiste ranks/totales y lo pasa a completed.

    Es una transición de un solo sentido.
    """
    finalize_service = FinalizeService(db)
    try:
        return await finalize_service.finalize_program(program_id)
    except ProgramNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ProgramAlreadyFinalizedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
