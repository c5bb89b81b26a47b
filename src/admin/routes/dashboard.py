"""Dashboard summary: GET /api/dashboard?yearId=..."""

from fastapi import APIRouter, Depends

from shared.auth import Session, get_session
from shared.dashboard import DashboardReporter

router = APIRouter()


@router.get("/api/dashboard")
async def get_dashboard(yearId: str, _: Session = Depends(get_session)):
    return await DashboardReporter().build(yearId)
