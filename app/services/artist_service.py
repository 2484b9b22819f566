from typing import Dict, Any, List, Optional
from app.db.mongodb import db
from app.schemas.artist import ArtistCreate, ArtistUpdate, PortfolioItemCreate
from datetime import datetime
from bson import ObjectId

def _prepare(artist: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if artist is None:
        return None
    artist["id"] = str(artist["_id"])
    artist.setdefault("portfolio", [])
    if artist.get("specialties") is None:
        artist["specialties"] = []
    return artist

async def get_studio_artists(studio_id: str) -> List[Dict[str, Any]]:
    """
    Get the artists working at a studio
    """
    cursor = db.db.artists.find({"studioId": studio_id}).sort("name", 1)
    artists = await cursor.to_list(length=100)
    return [_prepare(artist) for artist in artists]

async def get_artist_by_id(artist_id: str) -> Optional[Dict[str, Any]]:
    """
    Get an artist by ID
    """
    try:
        object_id = ObjectId(artist_id)
    except Exception:
        return None
    artist = await db.db.artists.find_one({"_id": object_id})
    return _prepare(artist)

async def create_artist(studio_id: str, artist_in: ArtistCreate) -> Dict[str, Any]:
    """
    Add an artist to a studio
    """
    artist_data = artist_in.dict()
    artist_data["studioId"] = studio_id
    artist_data["portfolio"] = []
    artist_data["createdAt"] = datetime.utcnow()

    result = await db.db.artists.insert_one(artist_data)
    created_artist = await db.db.artists.find_one({"_id": result.inserted_id})
    return _prepare(created_artist)

async def update_artist(artist_id: str, artist_update: ArtistUpdate) -> Optional[Dict[str, Any]]:
    """
    Update an artist
    """
    update_data = artist_update.dict(exclude_unset=True)

    if update_data:
        update_data["updatedAt"] = datetime.utcnow()
        await db.db.artists.update_one(
            {"_id": ObjectId(artist_id)},
            {"$set": update_data}
        )

    return await get_artist_by_id(artist_id)

async def delete_artist(artist_id: str) -> bool:
    """
    Remove an artist from their studio
    """
    result = await db.db.artists.delete_one({"_id": ObjectId(artist_id)})
    return result.deleted_count > 0

async def add_portfolio_item(artist_id: str, item_in: PortfolioItemCreate) -> Optional[Dict[str, Any]]:
    """
    Add a piece to an artist's portfolio
    """
    item = item_in.dict()
    item["id"] = str(ObjectId())

    result = await db.db.artists.update_one(
        {"_id": ObjectId(artist_id)},
        {"$push": {"portfolio": item}}
    )
    if result.modified_count == 0:
        return None
    return item

async def remove_portfolio_item(artist_id: str, item_id: str) -> Optional[Dict[str, Any]]:
    """
    Remove a piece from an artist's portfolio, returning the removed item
    """
    artist = await get_artist_by_id(artist_id)
    if not artist:
        return None
    item = next((p for p in artist["portfolio"] if p.get("id") == item_id), None)
    if item is None:
        return None

    await db.db.artists.update_one(
        {"_id": ObjectId(artist_id)},
        {"$pull": {"portfolio": {"id": item_id}}}
    )
    return item
