from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Dict, Any
import logging

from app.api.deps import get_owned_studio
from app.schemas.chat import ContactRequestCreate, ContactRequestResponse
from app.services.contact_service import (
    create_contact_request, get_studio_contact_requests, mark_contact_request_read
)
from app.services.studio_service import get_studio_by_id

router = APIRouter()

logger = logging.getLogger(__name__)

@router.post("/", response_model=ContactRequestResponse)
async def send_contact_request(request_in: ContactRequestCreate):
    """
    Send an inquiry to a studio; no account needed
    """
    studio = await get_studio_by_id(request_in.studioId)
    if not studio:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Studio not found"
        )

    request = await create_contact_request(request_in)
    logger.info(f"Contact request {request['id']} sent to studio {studio['id']}")
    return request

@router.get("/me", response_model=List[ContactRequestResponse])
async def list_my_contact_requests(studio: Dict[str, Any] = Depends(get_owned_studio)):
    """
    Inquiries received by the current owner's studio
    """
    return await get_studio_contact_requests(studio["id"])

@router.put("/{request_id}/read", response_model=Dict[str, Any])
async def read_contact_request(
    request_id: str,
    studio: Dict[str, Any] = Depends(get_owned_studio)
):
    """
    Mark an inquiry as read
    """
    if not await mark_contact_request_read(request_id, studio["id"]):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contact request not found"
        )
    return {"message": "Marked as read"}
