from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Dict, Any
import logging

from app.core.auth import get_current_admin
from app.schemas.studio import StudioResponse
from app.services.studio_service import get_pending_studios, verify_studio, delete_studio

router = APIRouter()

logger = logging.getLogger(__name__)

@router.get("/studios/pending", response_model=List[StudioResponse])
async def list_pending_studios(current_user: dict = Depends(get_current_admin)):
    """
    Studios waiting for approval
    """
    return await get_pending_studios()

@router.put("/studios/{studio_id}/verify", response_model=Dict[str, Any])
async def approve_studio(studio_id: str, current_user: dict = Depends(get_current_admin)):
    """
    Approve a studio listing
    """
    if not await verify_studio(studio_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Studio not found"
        )
    logger.info(f"Studio {studio_id} verified by admin {current_user['id']}")
    return {"message": "Studio verified"}

@router.delete("/studios/{studio_id}", status_code=204)
async def reject_studio(studio_id: str, current_user: dict = Depends(get_current_admin)):
    """
    Reject and remove a studio listing
    """
    if not await delete_studio(studio_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Studio not found"
        )
    logger.info(f"Studio {studio_id} rejected by admin {current_user['id']}")
