# edumanage/routes/dashboard.py
from fastapi import APIRouter, Depends

from edumanage.core.dependencies import get_dashboard_service, get_session_context
from edumanage.core.session import SessionContext
from edumanage.schemas.dashboard import DashboardResponse
from edumanage.services.dashboard_service import DashboardService

router = APIRouter(
    prefix="/api/v1/dashboard",
    tags=["Dashboard"]
)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    context: SessionContext = Depends(get_session_context),
    service: DashboardService = Depends(get_dashboard_service)
):
    return await service.build(context)
