from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class ReviewBase(BaseModel):
    comment: str = ""
    rating: int = Field(..., ge=1, le=5)


class ReviewCreate(ReviewBase):
    bookingId: str


class ReviewResponse(ReviewBase):
    id: str
    bookingId: str
    studioId: str
    customerId: str
    createdAt: datetime
    userName: str = "Anonymous User"
    userAvatar: Optional[str] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
