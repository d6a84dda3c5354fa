from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.dashboard.dashboard_schemas import DashboardOut
from app.services.dashboard.dashboard_service import get_dashboard
from app.utils.response import APIResponse, success_response

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/", response_model=APIResponse[DashboardOut])
async def get_dashboard_api(db: AsyncSession = Depends(get_db)):
    data = await get_dashboard(db)
    return success_response("Dashboard fetched successfully", data)
