from pydantic import BaseModel, Field
from typing import Optional, List, Any
from datetime import datetime
from enum import Enum

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

class PricingType(str, Enum):
    HOURLY = "hourly"
    SESSION = "session"
    PIECE = "piece"

class StudioSort(str, Enum):
    RATING = "rating"
    REVIEWS = "reviews"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"

class DaySchedule(BaseModel):
    open: str = Field("09:00", pattern=HHMM_PATTERN)
    close: str = Field("17:00", pattern=HHMM_PATTERN)
    isOpen: bool = True

class OpeningHours(BaseModel):
    monday: Optional[DaySchedule] = None
    tuesday: Optional[DaySchedule] = None
    wednesday: Optional[DaySchedule] = None
    thursday: Optional[DaySchedule] = None
    friday: Optional[DaySchedule] = None
    saturday: Optional[DaySchedule] = None
    sunday: Optional[DaySchedule] = None

class PriceRange(BaseModel):
    min: float = 0
    max: float = 0

class StudioCreate(BaseModel):
    name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    description: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    styles: List[str] = []

class StudioUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    styles: Optional[List[str]] = None
    images: Optional[List[str]] = None
    coverImage: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    priceMin: Optional[float] = Field(None, ge=0)
    priceMax: Optional[float] = Field(None, ge=0)
    pricingType: Optional[PricingType] = None
    responseTime: Optional[str] = None

class StudioResponse(BaseModel):
    id: str
    ownerId: str
    name: str
    slug: str
    location: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    description: str = ""
    styles: List[str] = []
    images: List[str] = []
    coverImage: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    priceRange: PriceRange = Field(default_factory=PriceRange)
    pricingType: PricingType = PricingType.HOURLY
    responseTime: Optional[str] = None
    openingHours: Optional[OpeningHours] = None
    verified: bool = False
    featured: bool = False
    rating: float = 0
    reviewCount: int = 0
    createdAt: datetime

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }

class StudioDetailResponse(StudioResponse):
    artists: List[Any] = []
    reviews: List[Any] = []
