# app/schemas/auth.py
from typing import Any, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.user import UserProfileResponse


class EmailMixin(BaseModel):
    email: EmailStr

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


# ==================== Requests ====================


class RegisterRequest(EmailMixin):
    username: str = Field(..., description="3-20 letters, digits, _ or CJK")
    password: str


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=1)


class EmailRequest(EmailMixin):
    """Body of resend-verification and forgot-password"""


class LoginRequest(EmailMixin):
    password: str = Field(..., min_length=1)
    remember_me: bool = False


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str


# ==================== Responses ====================


class RegisterData(BaseModel):
    user_id: int
    username: str
    email: str
    emailSent: bool = True


class SessionData(BaseModel):
    token: str
    user: UserProfileResponse


class ProfileData(BaseModel):
    user: UserProfileResponse


class AuthResponse(BaseModel):
    """Envelope shared by every auth route"""

    success: bool = True
    message: Optional[str] = None
    data: Optional[Any] = None
    errors: Optional[List[Any]] = None
