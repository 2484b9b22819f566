from typing import Dict, Any, Optional
from app.db.mongodb import db
from app.schemas.user import UserCreate, UserUpdate
from app.core.auth import get_password_hash, verify_password
from datetime import datetime
from bson import ObjectId

async def create_user(user_in: UserCreate) -> Optional[Dict[str, Any]]:
    """
    Create a new user in the database, None if the email is taken
    """
    if await get_user_by_email(user_in.email):
        return None

    # Create user with hashed password
    user_data = user_in.dict()
    user_data["role"] = user_in.role.value
    user_data["password"] = get_password_hash(user_data["password"])
    user_data["createdAt"] = datetime.utcnow()
    user_data["avatarUrl"] = None

    # Insert user into database
    result = await db.db.users.insert_one(user_data)

    # Get the created user
    created_user = await db.db.users.find_one({"_id": result.inserted_id})

    # Transform the _id field to string
    created_user["id"] = str(created_user["_id"])

    return created_user

async def authenticate_user(email: str, password: str) -> Optional[Dict[str, Any]]:
    """
    Return the user when the email/password pair is valid
    """
    user = await get_user_by_email(email)
    if not user or not verify_password(password, user.get("password", "")):
        return None
    user["id"] = str(user["_id"])
    return user

async def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    """
    Get a user by email
    """
    user = await db.db.users.find_one({"email": email})
    return user

async def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a user by ID
    """
    try:
        object_id = ObjectId(user_id)
    except Exception:
        return None
    user = await db.db.users.find_one({"_id": object_id})
    if user:
        user["id"] = str(user["_id"])
    return user

async def update_user(user_id: str, user_update: UserUpdate) -> Optional[Dict[str, Any]]:
    """
    Update a user
    """
    # Get the current user
    user = await get_user_by_id(user_id)
    if not user:
        return None

    # Update only provided fields
    update_data = user_update.dict(exclude_unset=True)

    if update_data:
        # Add updated timestamp
        update_data["updatedAt"] = datetime.utcnow()

        # Update user in database
        await db.db.users.update_one(
            {"_id": ObjectId(user_id)},
            {"$set": update_data}
        )

    # Get the updated user
    updated_user = await get_user_by_id(user_id)
    return updated_user
