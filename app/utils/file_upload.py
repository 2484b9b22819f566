import os
import shutil
import uuid
import logging
from fastapi import UploadFile
from pathlib import Path

from app.core.config import settings

logger = logging.getLogger(__name__)

UPLOADS_DIR = Path(settings.UPLOADS_DIR)

ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/png", "image/jpg", "image/webp"]

async def upload_file(file: UploadFile, folder: str = "general") -> str:
    """
    Upload a file to local storage and return the URL it is served from
    """
    # Create directory if it doesn't exist
    folder_path = UPLOADS_DIR / folder
    folder_path.mkdir(parents=True, exist_ok=True)

    # Generate unique filename
    file_extension = os.path.splitext(file.filename)[1] if file.filename else ""
    unique_filename = f"{uuid.uuid4()}{file_extension}"

    # Save file
    file_path = folder_path / unique_filename

    with open(file_path, "wb") as buffer:
        shutil.copyfileobj(file.file, buffer)

    logger.info(f"Stored upload {file_path}")
    return f"/uploads/{folder}/{unique_filename}"

async def delete_file(file_url: str) -> bool:
    """
    Delete a previously uploaded file given the URL upload_file returned
    """
    relative = file_url.lstrip("/")
    if relative.startswith("uploads/"):
        relative = relative[len("uploads/"):]
    abs_path = (UPLOADS_DIR / relative).resolve()

    if UPLOADS_DIR.resolve() not in abs_path.parents or not abs_path.exists():
        return False

    try:
        os.remove(abs_path)
    except OSError as e:
        logger.error(f"Could not delete upload {abs_path}: {e}")
        return False
    return True
