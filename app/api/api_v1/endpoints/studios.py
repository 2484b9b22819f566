from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional, Dict, Any
from app.api.deps import get_owned_studio
from app.core.auth import get_current_studio_owner
from app.schemas.studio import (
    StudioCreate, StudioUpdate, StudioResponse, StudioDetailResponse,
    StudioSort, OpeningHours
)
from app.services.studio_service import (
    create_studio, get_studio_by_id, get_studio_by_slug,
    search_studios, update_studio, update_opening_hours
)
from app.services.availability_service import DEFAULT_OPENING_HOURS

router = APIRouter()

@router.get("/", response_model=List[StudioResponse])
async def list_studios(
    q: Optional[str] = Query(None, description="Search studio names"),
    style: Optional[str] = Query(None, description="Tattoo style, e.g. japanese or fine-line"),
    city: Optional[str] = Query(None),
    minPrice: Optional[float] = Query(None, ge=0),
    maxPrice: Optional[float] = Query(None, ge=0),
    sort: StudioSort = StudioSort.RATING,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100)
):
    """
    Search verified studios
    """
    return await search_studios(
        q=q, style=style, city=city,
        min_price=minPrice, max_price=maxPrice,
        sort=sort, skip=skip, limit=limit
    )

@router.post("/", response_model=StudioResponse)
async def create_studio_listing(
    studio_in: StudioCreate,
    current_user: dict = Depends(get_current_studio_owner)
):
    """
    List a new studio. It stays hidden until an admin verifies it.
    """
    studio = await create_studio(studio_in, str(current_user["_id"]))
    if not studio:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You already have a studio listing"
        )
    return studio

@router.get("/me", response_model=StudioResponse)
async def get_my_studio(studio: Dict[str, Any] = Depends(get_owned_studio)):
    """
    Get the current owner's studio
    """
    return studio

@router.put("/me", response_model=StudioResponse)
async def update_my_studio(
    studio_update: StudioUpdate,
    studio: Dict[str, Any] = Depends(get_owned_studio)
):
    """
    Edit the current owner's studio profile
    """
    try:
        updated = await update_studio(studio["id"], studio_update)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Studio not found"
        )
    return updated

@router.get("/me/opening-hours", response_model=OpeningHours)
async def get_my_opening_hours(studio: Dict[str, Any] = Depends(get_owned_studio)):
    """
    Get the weekly schedule, or the default one if none was saved yet
    """
    return studio.get("openingHours") or DEFAULT_OPENING_HOURS

@router.put("/me/opening-hours", response_model=Dict[str, Any])
async def update_my_opening_hours(
    opening_hours: OpeningHours,
    studio: Dict[str, Any] = Depends(get_owned_studio)
):
    """
    Save the weekly schedule
    """
    schedule = opening_hours.dict(exclude_none=True)
    success = await update_opening_hours(studio["id"], schedule)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to update opening hours"
        )
    return {"message": "Schedule saved", "openingHours": schedule}

@router.get("/slug/{slug}", response_model=StudioDetailResponse)
async def get_studio_profile(slug: str):
    """
    Public studio page: profile, artists with portfolios and reviews
    """
    studio = await get_studio_by_slug(slug)
    if not studio:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Studio not found"
        )
    return studio

@router.get("/{studio_id}", response_model=StudioResponse)
async def get_studio(studio_id: str):
    """
    Get a studio by ID
    """
    studio = await get_studio_by_id(studio_id)
    if not studio:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Studio not found"
        )
    return studio
