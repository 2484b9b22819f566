from typing import Any, Dict

from fastapi import Depends, HTTPException, status

from app.core.auth import get_current_studio_owner
from app.services.studio_service import get_studio_by_owner

async def get_owned_studio(
    current_user: Dict[str, Any] = Depends(get_current_studio_owner)
) -> Dict[str, Any]:
    """The studio managed by the current studio owner."""
    studio = await get_studio_by_owner(str(current_user["_id"]))
    if not studio:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Studio not found for this account"
        )
    return studio
