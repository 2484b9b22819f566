from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime

class ConversationCreate(BaseModel):
    studioId: str

class ConversationStudio(BaseModel):
    name: str
    coverImage: Optional[str] = None

class ConversationCustomer(BaseModel):
    fullName: str
    avatarUrl: Optional[str] = None

class ConversationResponse(BaseModel):
    id: str
    customerId: str
    studioId: str
    createdAt: datetime
    updatedAt: datetime
    unreadCount: int = 0
    studio: Optional[ConversationStudio] = None
    customer: Optional[ConversationCustomer] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }

class MessageCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message cannot be empty")
        return value

class MessageResponse(BaseModel):
    id: str
    conversationId: str
    senderId: str
    content: str
    createdAt: datetime
    isRead: bool = False

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }

class ContactRequestCreate(BaseModel):
    studioId: str
    name: str = Field(..., min_length=1)
    email: EmailStr
    message: str = Field(..., min_length=1)

class ContactRequestResponse(BaseModel):
    id: str
    studioId: str
    name: str
    email: str
    message: str
    createdAt: datetime
    isRead: bool = False

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }

class InboxResponse(BaseModel):
    conversations: List[ConversationResponse] = []
    contactRequests: List[ContactRequestResponse] = []
