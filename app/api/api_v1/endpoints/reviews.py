from typing import List
from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import get_current_user
from app.schemas.review import ReviewCreate, ReviewResponse
from app.services.review_service import create_review, get_studio_reviews, get_review_by_id, delete_review

router = APIRouter()

@router.post("/", response_model=ReviewResponse)
async def add_review(
    review_in: ReviewCreate,
    current_user = Depends(get_current_user)
):
    """
    Review a completed appointment.
    """
    try:
        review = await create_review(review_in, str(current_user["_id"]))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    review["userName"] = current_user.get("fullName") or "Anonymous User"
    review["userAvatar"] = current_user.get("avatarUrl")
    return review

@router.get("/studio/{studio_id}", response_model=List[ReviewResponse])
async def get_reviews_for_studio(studio_id: str):
    """
    Get all reviews for a studio.
    """
    return await get_studio_reviews(studio_id)

@router.delete("/{review_id}", status_code=204)
async def remove_review(review_id: str, current_user = Depends(get_current_user)):
    """
    Delete a review. Only its author or an admin can delete it.
    """
    review = await get_review_by_id(review_id)
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    if review.get("customerId") != str(current_user["_id"]) and current_user.get("role") != "admin":
        raise HTTPException(
            status_code=403,
            detail="You can only delete your own reviews"
        )

    success = await delete_review(review_id)
    if not success:
        raise HTTPException(status_code=500, detail="Failed to delete review")
