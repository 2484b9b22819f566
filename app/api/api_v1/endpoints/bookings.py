from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional, Dict, Any
import logging

from app.api.deps import get_owned_studio
from app.core.auth import get_current_user
from app.schemas.booking import BookingCreate, BookingResponse, BookingStatus, BookingStatusUpdate
from app.services.artist_service import get_artist_by_id
from app.services.availability_service import AvailabilityUnavailableError
from app.services.booking_service import (
    create_booking, get_booking_by_id, get_customer_bookings,
    get_studio_bookings, update_booking_status, cancel_booking
)
from app.services.studio_service import get_studio_by_id

router = APIRouter()

logger = logging.getLogger(__name__)

@router.post("/", response_model=BookingResponse)
async def request_booking(
    booking_in: BookingCreate,
    current_user: dict = Depends(get_current_user)
):
    """
    Request an appointment with an artist
    """
    if current_user.get("role") != "customer":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only customers can request bookings"
        )

    studio = await get_studio_by_id(booking_in.studioId)
    if not studio:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Studio not found"
        )

    artist = await get_artist_by_id(booking_in.artistId)
    if not artist:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Artist not found"
        )

    try:
        booking = await create_booking(booking_in, str(current_user["_id"]), studio, artist)
    except AvailabilityUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Availability could not be confirmed, please try again"
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return booking

@router.get("/me", response_model=List[BookingResponse])
async def get_my_bookings(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: dict = Depends(get_current_user)
):
    """
    The current customer's appointments
    """
    return await get_customer_bookings(str(current_user["_id"]), skip, limit)

@router.get("/studio", response_model=List[BookingResponse])
async def get_my_studio_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    studio: Dict[str, Any] = Depends(get_owned_studio)
):
    """
    Bookings made at the current owner's studio
    """
    return await get_studio_bookings(studio["id"], status_filter, skip, limit)

@router.put("/{booking_id}/status", response_model=BookingResponse)
async def change_booking_status(
    booking_id: str,
    status_update: BookingStatusUpdate,
    studio: Dict[str, Any] = Depends(get_owned_studio)
):
    """
    Confirm, complete or cancel a booking (studio owner)
    """
    booking = await get_booking_by_id(booking_id)
    if not booking or booking["studioId"] != studio["id"]:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found"
        )

    try:
        updated = await update_booking_status(booking_id, status_update.status)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return updated

@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_my_booking(
    booking_id: str,
    current_user: dict = Depends(get_current_user)
):
    """
    Cancel one of the current customer's pending or confirmed bookings
    """
    booking = await get_booking_by_id(booking_id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found"
        )

    if booking["customerId"] != str(current_user["_id"]):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have access to this booking"
        )

    try:
        cancelled = await cancel_booking(booking_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return cancelled
