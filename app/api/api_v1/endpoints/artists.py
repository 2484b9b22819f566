from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Dict, Any
from app.api.deps import get_owned_studio
from app.schemas.artist import ArtistCreate, ArtistUpdate, ArtistResponse, PortfolioItem, PortfolioItemCreate
from app.services.artist_service import (
    get_studio_artists, get_artist_by_id, create_artist, update_artist,
    delete_artist, add_portfolio_item, remove_portfolio_item
)
from app.utils.file_upload import delete_file

router = APIRouter()

async def _get_own_artist(artist_id: str, studio: Dict[str, Any]) -> Dict[str, Any]:
    artist = await get_artist_by_id(artist_id)
    if not artist:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Artist not found"
        )
    if artist["studioId"] != studio["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This artist belongs to another studio"
        )
    return artist

@router.get("/studio/{studio_id}", response_model=List[ArtistResponse])
async def list_studio_artists(studio_id: str):
    """
    Get the artists of a studio
    """
    return await get_studio_artists(studio_id)

@router.post("/", response_model=ArtistResponse)
async def add_artist(
    artist_in: ArtistCreate,
    studio: Dict[str, Any] = Depends(get_owned_studio)
):
    """
    Add an artist to the current owner's studio
    """
    return await create_artist(studio["id"], artist_in)

@router.put("/{artist_id}", response_model=ArtistResponse)
async def edit_artist(
    artist_id: str,
    artist_update: ArtistUpdate,
    studio: Dict[str, Any] = Depends(get_owned_studio)
):
    """
    Update one of the studio's artists
    """
    await _get_own_artist(artist_id, studio)
    return await update_artist(artist_id, artist_update)

@router.delete("/{artist_id}", status_code=204)
async def remove_artist(
    artist_id: str,
    studio: Dict[str, Any] = Depends(get_owned_studio)
):
    """
    Remove an artist from the studio
    """
    await _get_own_artist(artist_id, studio)
    await delete_artist(artist_id)

@router.post("/{artist_id}/portfolio", response_model=PortfolioItem)
async def add_portfolio_piece(
    artist_id: str,
    item_in: PortfolioItemCreate,
    studio: Dict[str, Any] = Depends(get_owned_studio)
):
    """
    Add a piece to an artist's portfolio
    """
    await _get_own_artist(artist_id, studio)
    item = await add_portfolio_item(artist_id, item_in)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not add portfolio item"
        )
    return item

@router.delete("/{artist_id}/portfolio/{item_id}", status_code=204)
async def remove_portfolio_piece(
    artist_id: str,
    item_id: str,
    studio: Dict[str, Any] = Depends(get_owned_studio)
):
    """
    Remove a piece from an artist's portfolio
    """
    await _get_own_artist(artist_id, studio)
    item = await remove_portfolio_item(artist_id, item_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Portfolio item not found"
        )
    # Only images we stored ourselves are removed from disk
    if item.get("image", "").startswith("/uploads/"):
        await delete_file(item["image"])
