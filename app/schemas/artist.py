from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

def split_specialties(value):
    # The dashboard form sends "Blackwork, Fine Line" as a single string
    if isinstance(value, str):
        return [s.strip() for s in value.split(",") if s.strip()]
    return value

class PortfolioItemCreate(BaseModel):
    image: str
    title: str = ""
    style: str = ""

class PortfolioItem(PortfolioItemCreate):
    id: str

class ArtistCreate(BaseModel):
    name: str = Field(..., min_length=1)
    bio: str = ""
    specialties: List[str] = []
    yearsExperience: int = Field(0, ge=0)
    avatarUrl: Optional[str] = None

    @field_validator("specialties", mode="before")
    @classmethod
    def normalize_specialties(cls, value):
        return split_specialties(value)

class ArtistUpdate(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    specialties: Optional[List[str]] = None
    yearsExperience: Optional[int] = Field(None, ge=0)
    avatarUrl: Optional[str] = None

    @field_validator("specialties", mode="before")
    @classmethod
    def normalize_specialties(cls, value):
        return split_specialties(value)

class ArtistResponse(BaseModel):
    id: str
    studioId: str
    name: str
    bio: str = ""
    specialties: List[str] = []
    yearsExperience: int = 0
    avatarUrl: Optional[str] = None
    portfolio: List[PortfolioItem] = []
