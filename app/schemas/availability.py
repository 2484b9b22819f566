from pydantic import BaseModel
from typing import List

class AvailabilityResponse(BaseModel):
    studioId: str
    artistId: str
    date: str
    slots: List[str]
    takenSlots: List[str]
    isClosed: bool
    isFullyBooked: bool
