import logging
import re
from typing import Dict, Any, List, Optional
from app.db.mongodb import db
from app.schemas.studio import StudioCreate, StudioUpdate, StudioSort
from app.utils.slug import generate_slug
from datetime import datetime
from bson import ObjectId

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    StudioSort.RATING: [("rating", -1)],
    StudioSort.REVIEWS: [("reviewCount", -1)],
    StudioSort.PRICE_LOW: [("priceMin", 1)],
    StudioSort.PRICE_HIGH: [("priceMin", -1)],
}

def _prepare(studio: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Shape a stored studio document for API responses."""
    if studio is None:
        return None
    studio["id"] = str(studio["_id"])
    studio["priceRange"] = {
        "min": studio.get("priceMin") or 0,
        "max": studio.get("priceMax") or 0,
    }
    # Older documents may carry nulls for list fields
    for field in ("styles", "images"):
        if studio.get(field) is None:
            studio[field] = []
    return studio

def _loose_pattern(value: str) -> str:
    # "fine-line" and "Fine Line" both match a stored "Fine Line", same for "new-york"
    parts = [re.escape(part) for part in re.split(r"[\s-]+", value.strip()) if part]
    return "^" + r"[\s-]+".join(parts) + "$"

def build_studio_query(
    q: Optional[str] = None,
    style: Optional[str] = None,
    city: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    verified_only: bool = True,
) -> Dict[str, Any]:
    """
    Translate listing-page filters into a MongoDB filter.

    ``q`` is a case-insensitive substring match on the name, ``style`` must be
    one of the studio's styles and ``city`` matches exactly (ignoring case).
    "all" or blank values mean no filter.
    """
    query: Dict[str, Any] = {}
    if verified_only:
        query["verified"] = True

    if q and q.strip():
        query["name"] = {"$regex": re.escape(q.strip()), "$options": "i"}

    if style and style.strip() and style.lower() != "all":
        query["styles"] = {"$regex": _loose_pattern(style), "$options": "i"}

    if city and city.strip() and city.lower() != "all":
        query["city"] = {"$regex": _loose_pattern(city), "$options": "i"}

    if min_price is not None and max_price is not None:
        query["priceMin"] = {"$gte": min_price, "$lte": max_price}
    elif min_price is not None:
        query["priceMin"] = {"$gte": min_price}
    elif max_price is not None:
        query["priceMin"] = {"$lte": max_price}

    return query

async def search_studios(
    q: Optional[str] = None,
    style: Optional[str] = None,
    city: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    sort: StudioSort = StudioSort.RATING,
    skip: int = 0,
    limit: int = 20,
) -> List[Dict[str, Any]]:
    """
    Verified studios matching the listing filters
    """
    query = build_studio_query(q, style, city, min_price, max_price)

    cursor = db.db.studios.find(query).sort(SORT_FIELDS[sort]).skip(skip).limit(limit)
    studios = await cursor.to_list(length=limit)

    return [_prepare(studio) for studio in studios]

async def get_studio_by_id(studio_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a studio by ID
    """
    try:
        object_id = ObjectId(studio_id)
    except Exception:
        return None
    studio = await db.db.studios.find_one({"_id": object_id})
    return _prepare(studio)

async def get_studio_by_owner(owner_id: str) -> Optional[Dict[str, Any]]:
    """
    Get the studio a studio owner manages
    """
    studio = await db.db.studios.find_one({"ownerId": owner_id})
    return _prepare(studio)

async def get_studio_by_slug(slug: str) -> Optional[Dict[str, Any]]:
    """
    Get a public studio profile with its artists and reviews
    """
    from app.services.artist_service import get_studio_artists
    from app.services.review_service import get_studio_reviews

    studio = _prepare(await db.db.studios.find_one({"slug": slug}))
    if not studio:
        return None

    studio["artists"] = await get_studio_artists(studio["id"])
    studio["reviews"] = await get_studio_reviews(studio["id"])
    return studio

async def _unique_slug(base: str) -> str:
    base = base or "studio"
    slug = base
    suffix = 2
    while await db.db.studios.find_one({"slug": slug}, {"_id": 1}):
        slug = f"{base}-{suffix}"
        suffix += 1
    return slug

async def create_studio(studio_in: StudioCreate, owner_id: str) -> Optional[Dict[str, Any]]:
    """
    Create a studio listing for an owner. Owners get one studio; returns None
    if they already have it.
    """
    if await db.db.studios.find_one({"ownerId": owner_id}, {"_id": 1}):
        return None

    studio_data = studio_in.dict()
    studio_data["ownerId"] = owner_id
    studio_data["slug"] = await _unique_slug(generate_slug(studio_in.name, studio_in.location))
    studio_data["address"] = studio_in.location
    studio_data["city"] = studio_in.location.split(",")[0].strip() or studio_in.location
    studio_data["verified"] = False
    studio_data["featured"] = False
    studio_data["priceMin"] = 0
    studio_data["priceMax"] = 100
    studio_data["pricingType"] = "hourly"
    studio_data["images"] = []
    studio_data["rating"] = 0
    studio_data["reviewCount"] = 0
    studio_data["openingHours"] = None
    studio_data["createdAt"] = datetime.utcnow()

    result = await db.db.studios.insert_one(studio_data)
    logger.info(f"Studio {studio_data['slug']} created by owner {owner_id}, pending approval")

    created_studio = await db.db.studios.find_one({"_id": result.inserted_id})
    return _prepare(created_studio)

async def update_studio(studio_id: str, studio_update: StudioUpdate) -> Optional[Dict[str, Any]]:
    """
    Update a studio
    """
    studio = await get_studio_by_id(studio_id)
    if not studio:
        return None

    # Update only provided fields
    update_data = studio_update.dict(exclude_unset=True)
    if "pricingType" in update_data and update_data["pricingType"] is not None:
        update_data["pricingType"] = studio_update.pricingType.value

    min_price = update_data.get("priceMin", studio.get("priceMin"))
    max_price = update_data.get("priceMax", studio.get("priceMax"))
    if min_price is not None and max_price is not None and min_price > max_price:
        raise ValueError("Minimum price cannot exceed maximum price")

    if update_data:
        update_data["updatedAt"] = datetime.utcnow()
        await db.db.studios.update_one(
            {"_id": ObjectId(studio_id)},
            {"$set": update_data}
        )

    return await get_studio_by_id(studio_id)

async def update_opening_hours(studio_id: str, opening_hours: Dict[str, Any]) -> bool:
    """
    Replace a studio's weekly schedule
    """
    result = await db.db.studios.update_one(
        {"_id": ObjectId(studio_id)},
        {"$set": {"openingHours": opening_hours, "updatedAt": datetime.utcnow()}}
    )
    return result.matched_count > 0

async def get_pending_studios() -> List[Dict[str, Any]]:
    """
    Studios waiting for admin approval, oldest first
    """
    cursor = db.db.studios.find({"verified": False}).sort("createdAt", 1)
    studios = await cursor.to_list(length=100)
    return [_prepare(studio) for studio in studios]

async def verify_studio(studio_id: str) -> bool:
    """
    Approve a studio so it shows up in search
    """
    try:
        object_id = ObjectId(studio_id)
    except Exception:
        return False
    result = await db.db.studios.update_one(
        {"_id": object_id},
        {"$set": {"verified": True, "updatedAt": datetime.utcnow()}}
    )
    return result.matched_count > 0

async def delete_studio(studio_id: str) -> bool:
    """
    Reject a studio listing, removing it together with its artists
    """
    try:
        object_id = ObjectId(studio_id)
    except Exception:
        return False
    result = await db.db.studios.delete_one({"_id": object_id})
    if result.deleted_count:
        await db.db.artists.delete_many({"studioId": studio_id})
        logger.info(f"Studio {studio_id} deleted")
    return result.deleted_count > 0
