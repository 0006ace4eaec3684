"""
Controlador de Admin - Recálculo de puntos e importación de resultados
"""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from app.core.dependencies import Database
from app.models.results import RecalculationResult
from app.schemas.import_results import ImportCounts, ImportRow
from app.services.import_service import ResultsImportService
from app.services.points_service import PointsService


router = APIRouter(prefix="/admin", tags=["admin"])


# ============================================
# REQUEST / RESPONSE SCHEMAS
# ============================================

class ImportResultsRequest(BaseModel):
    """Request con las filas de resultados ya parseadas"""
    rows: list[ImportRow]


class ImportResultsResponse(BaseModel):
    success: bool
    counts: ImportCounts
    team_points: RecalculationResult


# ============================================
# POINTS ENDPOINTS
# ============================================

@router.post("/recalculate-points", response_model=RecalculationResult)
async def recalculate_points(db: Database):
    """
    Recalcular el cache total_points de todos los equipos.

    Responde 200 aunque algunos equipos fallen; revisar `failed`.
    """
    points_service = PointsService(db)
    return await points_service.recompute_all_team_totals()


@router.post("/import-results", response_model=ImportResultsResponse)
async def import_results(request: ImportResultsRequest, db: Database):
    """
    Importar podios históricos.

    Filas fuera del podio o incompletas se descartan y se cuentan.
    """
    if not request.rows:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Debes enviar al menos una fila"
        )

    import_service = ResultsImportService(db)
    counts, team_points = await import_service.import_results(request.rows)

    return ImportResultsResponse(
        success=True,
        counts=counts,
        team_points=team_points
    )
