"""
Controlador de equipos - Clasificación general y puntos por equipo
"""

from fastapi import APIRouter, HTTPException, status

from app.core.dependencies import Database
from app.models.results import TeamPoints
from app.services.points_service import PointsService, TeamNotFoundError


router = APIRouter(prefix="/teams", tags=["teams"])


@router.get("/standings", response_model=list[TeamPoints])
async def get_standings(db: Database):
    """
    Clasificación general de equipos.

    Se calcula desde los ranks de los programas completed, no desde el cache.
    """
    points_service = PointsService(db)
    return await points_service.get_standings()


@router.get("/{team_id}/points", response_model=TeamPoints)
async def get_team_points(team_id: str, db: Database):
    """Puntos totales de un equipo con el detalle por programa."""
    points_service = PointsService(db)
    try:
        return await points_service.get_team_points(team_id)
    except TeamNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
