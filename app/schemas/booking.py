from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime, date as date_type
from enum import Enum

from app.schemas.studio import HHMM_PATTERN

class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

# Owner-driven status changes; anything else is rejected
ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}

class BookingCreate(BaseModel):
    studioId: str
    artistId: str
    date: date_type
    time: str = Field(..., pattern=HHMM_PATTERN)
    notes: Optional[str] = None
    customerName: str = Field(..., min_length=1)
    customerEmail: EmailStr
    customerPhone: str = Field(..., min_length=1)

class BookingStatusUpdate(BaseModel):
    status: BookingStatus

class BookingStudio(BaseModel):
    id: str
    name: str
    location: Optional[str] = None

class BookingResponse(BaseModel):
    id: str
    studioId: str
    artistId: str
    customerId: str
    date: str
    time: str
    status: BookingStatus
    notes: Optional[str] = None
    customerName: str
    customerEmail: str
    customerPhone: str
    createdAt: datetime
    updatedAt: Optional[datetime] = None
    studio: Optional[BookingStudio] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
