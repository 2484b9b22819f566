from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from typing import Any, Dict
from datetime import timedelta
import logging

from app.core.auth import create_access_token, get_current_user
from app.core.config import settings
from app.schemas.user import Token, UserCreate, UserResponse, UserUpdate
from app.services.user_service import authenticate_user, create_user, update_user

router = APIRouter()

logger = logging.getLogger(__name__)

def _issue_token(user: Dict[str, Any]) -> Dict[str, Any]:
    access_token = create_access_token(
        data={"sub": str(user["_id"]), "role": user.get("role")},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return {"access_token": access_token, "token_type": "bearer", "user": user}

@router.post("/register", response_model=Token)
async def register(user_in: UserCreate) -> Any:
    """Create a customer or studio owner account and sign in"""
    if user_in.role.value == "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin accounts cannot be self-registered"
        )

    user = await create_user(user_in)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email already exists"
        )
    logger.info(f"Registered {user['role']} account {user['id']}")
    return _issue_token(user)

@router.post("/login", response_model=Token)
async def login(form_data: OAuth2PasswordRequestForm = Depends()) -> Any:
    """Sign in with email (as username) and password"""
    user = await authenticate_user(form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _issue_token(user)

@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: Dict[str, Any] = Depends(get_current_user)):
    """Get current user profile"""
    return current_user

@router.put("/me", response_model=UserResponse)
async def update_user_profile(
    user_update: UserUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """Update current user profile"""
    updated_user = await update_user(str(current_user["_id"]), user_update)

    if not updated_user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return updated_user
