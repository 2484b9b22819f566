import logging
from typing import Dict, Any, List, Optional
from app.db.mongodb import db
from app.schemas.booking import BookingCreate, BookingStatus, ALLOWED_TRANSITIONS
from datetime import datetime
from bson import ObjectId

logger = logging.getLogger(__name__)

# Statuses that hold on to an artist's time slot
ACTIVE_STATUSES = [BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value]

def _prepare(booking: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if booking is None:
        return None
    booking["id"] = str(booking["_id"])
    return booking

async def get_taken_times(artist_id: str, date: str) -> List[Dict[str, Any]]:
    """
    Rows of {"slot": "HH:MM[:SS]"} already booked for an artist on a date (YYYY-MM-DD)
    """
    pipeline = [
        {"$match": {"artistId": artist_id, "date": date, "status": {"$in": ACTIVE_STATUSES}}},
        {"$project": {"_id": 0, "slot": "$time"}},
        {"$sort": {"slot": 1}},
    ]
    return await db.db.bookings.aggregate(pipeline).to_list(length=None)

async def create_booking(
    booking_in: BookingCreate, customer_id: str, studio: Dict[str, Any], artist: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Request a booking with an artist. Raises ValueError when the artist does
    not work at the studio or the date/time is not bookable.
    """
    from app.services.availability_service import generate_slots, is_date_disabled, load_taken_slots

    if artist.get("studioId") != studio["id"]:
        raise ValueError("Artist does not work at this studio")

    opening_hours = studio.get("openingHours")
    if is_date_disabled(booking_in.date, opening_hours):
        raise ValueError("The studio is not taking bookings on this date")

    taken = await load_taken_slots(booking_in.artistId, booking_in.date)
    # The default slot list for studios without opening hours keeps taken slots
    if booking_in.time in taken:
        raise ValueError("This time slot is not available")
    if booking_in.time not in generate_slots(opening_hours, booking_in.date, taken):
        raise ValueError("This time slot is not available")

    booking_data = booking_in.dict()
    booking_data["date"] = booking_in.date.isoformat()
    booking_data["customerEmail"] = str(booking_in.customerEmail)
    booking_data["customerId"] = customer_id
    booking_data["status"] = BookingStatus.PENDING.value
    booking_data["createdAt"] = datetime.utcnow()

    result = await db.db.bookings.insert_one(booking_data)
    logger.info(f"Booking {result.inserted_id} requested for artist {booking_in.artistId} on {booking_data['date']} {booking_in.time}")

    created_booking = await db.db.bookings.find_one({"_id": result.inserted_id})
    return _prepare(created_booking)

async def get_booking_by_id(booking_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a booking by ID
    """
    try:
        object_id = ObjectId(booking_id)
    except Exception:
        return None
    booking = await db.db.bookings.find_one({"_id": object_id})
    return _prepare(booking)

async def get_customer_bookings(customer_id: str, skip: int = 0, limit: int = 50) -> List[Dict[str, Any]]:
    """
    Get a customer's bookings, latest date first, each with its studio summary
    """
    cursor = db.db.bookings.find({"customerId": customer_id}).sort("date", -1).skip(skip).limit(limit)
    bookings = [_prepare(b) for b in await cursor.to_list(length=limit)]

    studio_ids = list({ObjectId(b["studioId"]) for b in bookings if ObjectId.is_valid(b.get("studioId", ""))})
    studios = {}
    if studio_ids:
        async for studio in db.db.studios.find({"_id": {"$in": studio_ids}}, {"name": 1, "location": 1}):
            studios[str(studio["_id"])] = {
                "id": str(studio["_id"]),
                "name": studio.get("name", ""),
                "location": studio.get("location"),
            }

    for booking in bookings:
        booking["studio"] = studios.get(booking["studioId"])
    return bookings

async def get_studio_bookings(
    studio_id: str,
    status: Optional[BookingStatus] = None,
    skip: int = 0,
    limit: int = 50
) -> List[Dict[str, Any]]:
    """
    Get bookings for a studio, soonest first
    """
    query: Dict[str, Any] = {"studioId": studio_id}
    if status:
        query["status"] = status.value

    cursor = db.db.bookings.find(query).sort([("date", 1), ("time", 1)]).skip(skip).limit(limit)
    bookings = await cursor.to_list(length=limit)
    return [_prepare(b) for b in bookings]

async def update_booking_status(booking_id: str, new_status: BookingStatus) -> Optional[Dict[str, Any]]:
    """
    Move a booking to a new status. Raises ValueError for transitions the
    booking lifecycle does not allow.
    """
    booking = await get_booking_by_id(booking_id)
    if not booking:
        return None

    current = BookingStatus(booking["status"])
    if new_status not in ALLOWED_TRANSITIONS[current]:
        raise ValueError(f"Cannot change a {current.value} booking to {new_status.value}")

    await db.db.bookings.update_one(
        {"_id": ObjectId(booking_id)},
        {"$set": {"status": new_status.value, "updatedAt": datetime.utcnow()}}
    )
    return await get_booking_by_id(booking_id)

async def cancel_booking(booking_id: str) -> Optional[Dict[str, Any]]:
    """
    Cancel a booking
    """
    return await update_booking_status(booking_id, BookingStatus.CANCELLED)
