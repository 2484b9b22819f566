from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from typing import List
from datetime import date
from functools import partial
import logging

from app.schemas.availability import AvailabilityResponse
from app.services.availability_service import (
    AvailabilityStream, AvailabilityUnavailableError,
    disabled_days_of_month, get_availability
)
from app.services.studio_service import get_studio_by_id

router = APIRouter()

logger = logging.getLogger(__name__)

@router.get("/{studio_id}", response_model=AvailabilityResponse)
async def get_artist_availability(
    studio_id: str,
    artistId: str = Query(..., description="Artist to book"),
    date: date = Query(..., description="Day to check (YYYY-MM-DD)")
):
    """
    Free hour slots for an artist on a date
    """
    studio = await get_studio_by_id(studio_id)
    if not studio:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Studio not found"
        )

    try:
        return await get_availability(studio, artistId, date)
    except AvailabilityUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Availability is temporarily unavailable, please try again"
        )

@router.get("/{studio_id}/disabled-dates", response_model=List[int])
async def get_disabled_dates(
    studio_id: str,
    year: int = Query(..., description="Year to check"),
    month: int = Query(..., description="Month to check (1-12)")
):
    """
    Days of a month that cannot be picked in the booking calendar
    """
    if month < 1 or month > 12:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Month must be between 1 and 12"
        )

    studio = await get_studio_by_id(studio_id)
    if not studio:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Studio not found"
        )

    return disabled_days_of_month(year, month, studio.get("openingHours"))

@router.websocket("/ws/{studio_id}")
async def availability_socket(websocket: WebSocket, studio_id: str):
    """
    Live availability for the booking form.

    The client sends {"artistId": ..., "date": "YYYY-MM-DD"} whenever the
    selection changes; only the answer to the latest selection is sent back.
    """
    studio = await get_studio_by_id(studio_id)
    if not studio:
        await websocket.close(code=4404)
        return

    await websocket.accept()
    stream = AvailabilityStream(partial(get_studio_by_id, studio_id), websocket.send_json)
    try:
        while True:
            selection = await websocket.receive_json()
            try:
                artist_id = str(selection["artistId"])
                day = date.fromisoformat(str(selection["date"]))
            except (KeyError, TypeError, ValueError):
                await websocket.send_json({"error": "Expected {\"artistId\", \"date\": \"YYYY-MM-DD\"}"})
                continue
            stream.select(artist_id, day)
    except WebSocketDisconnect:
        logger.debug(f"Availability socket for studio {studio_id} closed")
    finally:
        await stream.close()
