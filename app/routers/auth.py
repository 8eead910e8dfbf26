from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_user, get_mailer
from app.core.limiter import EMAIL_LIMIT, LOGIN_LIMIT, limiter
from app.models.user import User
from app.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    EmailRequest,
    LoginRequest,
    ProfileData,
    RegisterData,
    RegisterRequest,
    ResetPasswordRequest,
    SessionData,
    VerifyEmailRequest,
)
from app.schemas.user import ProfileUpdateRequest, UserProfileResponse
from app.services.auth import AccountService
from app.services.mail import Mailer

router = APIRouter(prefix="/auth", tags=["auth"])


def get_account_service(
    db: Session = Depends(get_db), mailer: Mailer = Depends(get_mailer)
) -> AccountService:
    return AccountService(db, mailer)


def _session(token: str, user: User) -> SessionData:
    return SessionData(token=token, user=UserProfileResponse.model_validate(user))


@router.post(
    "/register",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    """Create an account and mail a verification link"""
    user = await service.register(payload.username, payload.email, payload.password)
    return AuthResponse(
        message="Registration successful! Please check your email to verify your account",
        data=RegisterData(user_id=user.id, username=user.username, email=user.email),
    )


@router.post("/verify-email", response_model=AuthResponse, response_model_exclude_none=True)
async def verify_email(
    payload: VerifyEmailRequest,
    service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    token, user = await service.verify_email(payload.token)
    return AuthResponse(message="Email verified successfully!", data=_session(token, user))


@router.post(
    "/resend-verification", response_model=AuthResponse, response_model_exclude_none=True
)
@limiter.limit(EMAIL_LIMIT)
async def resend_verification(
    request: Request,
    payload: EmailRequest,
    service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    await service.resend_verification(payload.email)
    return AuthResponse(message="Verification email sent again, please check your inbox")


@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
@limiter.limit(LOGIN_LIMIT)
async def login(
    request: Request,
    payload: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    token, user = await service.login(
        payload.email, payload.password, payload.remember_me
    )
    return AuthResponse(message="Login successful", data=_session(token, user))


@router.post(
    "/forgot-password", response_model=AuthResponse, response_model_exclude_none=True
)
@limiter.limit(EMAIL_LIMIT)
async def forgot_password(
    request: Request,
    payload: EmailRequest,
    service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    """Same answer whether or not the email is registered"""
    message = await service.request_password_reset(payload.email)
    return AuthResponse(message=message)


@router.post("/reset-password", response_model=AuthResponse, response_model_exclude_none=True)
async def reset_password(
    payload: ResetPasswordRequest,
    service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    await service.reset_password(payload.token, payload.password)
    return AuthResponse(
        message="Password reset successful, please log in with your new password"
    )


@router.post(
    "/change-password", response_model=AuthResponse, response_model_exclude_none=True
)
async def change_password(
    payload: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    await service.change_password(
        current_user, payload.current_password, payload.new_password
    )
    return AuthResponse(message="Password changed successfully")


@router.get("/me", response_model=AuthResponse, response_model_exclude_none=True)
async def me(current_user: User = Depends(get_current_user)) -> AuthResponse:
    return AuthResponse(
        data=ProfileData(user=UserProfileResponse.model_validate(current_user))
    )


@router.patch("/me", response_model=AuthResponse, response_model_exclude_none=True)
async def update_me(
    payload: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    """Update the caller's bio or avatar"""
    user = service.update_profile(current_user, **payload.model_dump(exclude_unset=True))
    return AuthResponse(
        message="Profile updated",
        data=ProfileData(user=UserProfileResponse.model_validate(user)),
    )
