from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum

class UserRole(str, Enum):
    CUSTOMER = "customer"
    STUDIO_OWNER = "studio_owner"
    ADMIN = "admin"

class UserBase(BaseModel):
    email: EmailStr
    fullName: str = Field(..., min_length=1)

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    # Admins are promoted out of band, never self-registered
    role: UserRole = UserRole.CUSTOMER

class UserUpdate(BaseModel):
    fullName: Optional[str] = None
    avatarUrl: Optional[str] = None

class UserResponse(BaseModel):
    id: str
    email: EmailStr
    fullName: str
    role: UserRole
    avatarUrl: Optional[str] = None
    createdAt: datetime

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
