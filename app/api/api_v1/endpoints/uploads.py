from fastapi import APIRouter, Depends, UploadFile, File, HTTPException, status
from typing import Dict, Any

from app.api.deps import get_owned_studio
from app.core.auth import get_current_user
from app.schemas.user import UserUpdate
from app.services.user_service import update_user
from app.utils.file_upload import upload_file, ALLOWED_IMAGE_TYPES

router = APIRouter()

def _check_image(file: UploadFile) -> None:
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only JPEG, PNG and WebP images are allowed"
        )

@router.post("/avatar")
async def upload_avatar(
    file: UploadFile = File(...),
    current_user: dict = Depends(get_current_user)
):
    """
    Upload a profile picture for the current user
    """
    _check_image(file)
    file_url = await upload_file(file, folder="avatars")
    await update_user(str(current_user["_id"]), UserUpdate(avatarUrl=file_url))
    return {"fileUrl": file_url}

@router.post("/studio-image")
async def upload_studio_image(
    file: UploadFile = File(...),
    studio: Dict[str, Any] = Depends(get_owned_studio)
):
    """
    Upload a gallery, cover or portfolio image for the owner's studio.
    Attach the returned URL through the studio or artist endpoints.
    """
    _check_image(file)
    file_url = await upload_file(file, folder=f"studios/{studio['id']}")
    return {"fileUrl": file_url}
