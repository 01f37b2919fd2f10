"""
Reception API endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from pvz_service.app.core.dependencies import get_current_user
from pvz_service.app.db.session import get_db
from pvz_service.app.domain.principal import Principal
from pvz_service.app.domain.receptions.reception_service import ReceptionService
from pvz_service.app.schemas.pvz import ReceptionCreate, ReceptionResponse

router = APIRouter(prefix="/receptions", tags=["Receptions"])


@router.post("", response_model=ReceptionResponse, status_code=status.HTTP_201_CREATED)
async def create_reception(
    reception_data: ReceptionCreate,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Open a reception at a pickup point (employee only).

    Fails with 400 if the pickup point already has an unclosed reception.
    """
    reception = await ReceptionService.open_reception(db, current_user, str(reception_data.pvz_id))
    return ReceptionResponse.from_model(reception)
