# app/schemas/user.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserProfileResponse(BaseModel):
    """Public view of an account; the password hash is never part of it"""

    id: int
    username: str
    email: str
    avatar: Optional[str] = None
    bio: Optional[str] = None
    is_admin: bool
    is_email_verified: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthorResponse(BaseModel):
    id: int
    username: str
    avatar: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdateRequest(BaseModel):
    """Self-service profile fields; anything else is ignored"""

    bio: Optional[str] = Field(None, max_length=500)
    avatar: Optional[str] = Field(None, max_length=500)
