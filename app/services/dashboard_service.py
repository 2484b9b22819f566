from typing import Dict, Any, Optional
from app.db.mongodb import db
from app.schemas.booking import BookingStatus
from datetime import date

async def get_dashboard_stats(studio: Dict[str, Any], today: Optional[date] = None) -> Dict[str, Any]:
    """
    Headline numbers and upcoming appointments for a studio owner's dashboard
    """
    studio_id = studio["id"]
    today = today or date.today()

    pipeline = [
        {"$match": {"studioId": studio_id}},
        {"$group": {"_id": "$status", "count": {"$sum": 1}}},
    ]
    by_status = {status.value: 0 for status in BookingStatus}
    async for row in db.db.bookings.aggregate(pipeline):
        by_status[row["_id"]] = row["count"]

    clients = await db.db.bookings.distinct(
        "customerId",
        {"studioId": studio_id, "status": {"$ne": BookingStatus.CANCELLED.value}}
    )

    cursor = db.db.bookings.find({
        "studioId": studio_id,
        "date": {"$gte": today.isoformat()},
        "status": {"$ne": BookingStatus.CANCELLED.value},
    }).sort([("date", 1), ("time", 1)]).limit(10)
    upcoming = await cursor.to_list(length=10)
    for booking in upcoming:
        booking["id"] = str(booking["_id"])

    return {
        "totalBookings": sum(by_status.values()),
        "bookingsByStatus": by_status,
        "activeClients": len(clients),
        "averageRating": studio.get("rating", 0) or 0,
        "reviewCount": studio.get("reviewCount", 0) or 0,
        "upcomingAppointments": upcoming,
    }
