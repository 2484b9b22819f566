from fastapi import APIRouter, Depends
from typing import Dict, Any

from app.api.deps import get_owned_studio
from app.schemas.dashboard import DashboardStats
from app.services.dashboard_service import get_dashboard_stats

router = APIRouter()

@router.get("/stats", response_model=DashboardStats)
async def get_stats(studio: Dict[str, Any] = Depends(get_owned_studio)):
    """
    Booking totals, clients, rating and upcoming appointments for the owner's studio
    """
    return await get_dashboard_stats(studio)
