from pydantic import BaseModel
from typing import Dict, List

from app.schemas.booking import BookingResponse

class DashboardStats(BaseModel):
    totalBookings: int = 0
    bookingsByStatus: Dict[str, int] = {}
    activeClients: int = 0
    averageRating: float = 0
    reviewCount: int = 0
    upcomingAppointments: List[BookingResponse] = []
