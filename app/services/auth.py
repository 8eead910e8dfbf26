# app/services/auth.py
import logging
from datetime import timedelta
from typing import Optional, Tuple

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.decorator import db_exception
from app.core.exceptions import (
    AlreadyVerified,
    Conflict,
    EmailNotVerified,
    Forbidden,
    InternalError,
    InvalidCredentials,
    InvalidOrExpiredToken,
    NotFound,
)
from app.core.hasher import PasswordHelper
from app.core.password_policy import PasswordPolicy, enforce_username
from app.core.security import (
    clear_expired_tokens,
    issue_one_time_token,
    jwt_manager,
)
from app.models.user import User
from app.services.mail import Mailer
from app.utils.clock import utcnow
from app.utils.email_templates import (
    password_changed_email,
    password_reset_email,
    verification_email,
)

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = (
    "If the email is registered, a password reset link has been sent to it"
)


def mask_email(email: str) -> str:
    """Keep the first character of the local part and the domain for logs"""
    local, _, domain = (email or "").strip().partition("@")
    if not domain:
        return "***"
    return f"{local[:1]}***@{domain}"


class AccountService:
    """Registration, verification, login and password management.

    Bcrypt work runs in the threadpool so the event loop stays free; the
    session calls stay synchronous like everywhere else in the services.
    """

    def __init__(self, db: Session, mailer: Mailer):
        self.db = db
        self.mailer = mailer
        self.verify_ttl = timedelta(hours=settings.email_verify_expire_hours)
        self.reset_ttl = timedelta(hours=settings.password_reset_expire_hours)

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------

    @db_exception
    def _save(self, user: User) -> User:
        clear_expired_tokens(user, utcnow())
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def _find_by_email(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )

    def _find_by_live_token(self, column, expires_column, token: str) -> Optional[User]:
        if not token:
            return None
        return (
            self.db.query(User)
            .filter(column == token, expires_column > utcnow())
            .first()
        )

    def _issue_session(self, user: User, remember_me: bool) -> str:
        return jwt_manager.create_access_token(user.id, user.username, remember_me)

    @staticmethod
    def _link(path: str, token: str) -> str:
        return f"{settings.frontend_url.rstrip('/')}/{path}?token={token}"

    async def _send_verification(self, user: User, resend: bool = False) -> bool:
        subject, html = verification_email(
            settings.site_name,
            self._link("verify-email", user.email_verify_token),
            resend=resend,
        )
        return await self.mailer.send(user.email, subject, html)

    # ------------------------------------------------------------------
    # Registration & verification
    # ------------------------------------------------------------------

    async def register(self, username: str, email: str, password: str) -> User:
        email = email.strip().lower()
        enforce_username(username)
        PasswordPolicy.enforce(password)

        existing = (
            self.db.query(User)
            .filter(or_(func.lower(User.email) == email, User.username == username))
            .first()
        )
        if existing:
            if existing.email.lower() == email:
                raise Conflict("This email is already registered")
            raise Conflict("This username is already taken")

        hashed = await run_in_threadpool(PasswordHelper.hash_password, password)
        verify = issue_one_time_token(self.verify_ttl)
        user = User(
            username=username,
            email=email,
            hashed_password=hashed,
            is_email_verified=False,
            email_verify_token=verify.token,
            email_verify_expires=verify.expires_at,
        )
        self._save(user)
        logger.info(f"Account registered: {user.id} ({username})")

        # delivery problems never fail a registration
        if not await self._send_verification(user):
            logger.warning(f"Verification mail for account {user.id} was not delivered")

        return user

    async def verify_email(self, token: str) -> Tuple[str, User]:
        user = self._find_by_live_token(
            User.email_verify_token, User.email_verify_expires, token
        )
        if not user:
            raise InvalidOrExpiredToken("The verification link is invalid or has expired")

        user.is_email_verified = True
        user.email_verify_token = None
        user.email_verify_expires = None
        self._save(user)
        logger.info(f"Email verified for account {user.id}")

        return self._issue_session(user, remember_me=True), user

    async def resend_verification(self, email: str) -> None:
        user = self._find_by_email(email)
        if not user:
            raise NotFound("This email is not registered")
        if user.is_email_verified:
            raise AlreadyVerified()

        verify = issue_one_time_token(self.verify_ttl)
        user.email_verify_token = verify.token
        user.email_verify_expires = verify.expires_at
        self._save(user)

        if not await self._send_verification(user, resend=True):
            raise InternalError("Failed to send the email, please try again later")

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    async def login(
        self, email: str, password: str, remember_me: bool = False
    ) -> Tuple[str, User]:
        now = utcnow()
        user = self._find_by_email(email)
        if not user:
            logger.warning(f"Login failed: unknown email {mask_email(email)}")
            raise InvalidCredentials()

        if user.is_locked(now):
            logger.warning(f"Login refused: account {user.id} is locked")
            # locked accounts answer like unknown ones
            raise InvalidCredentials()

        matched = await run_in_threadpool(
            PasswordHelper.check_password, password, user.hashed_password
        )
        if not matched:
            self._register_failed_login(user, now)
            raise InvalidCredentials()

        if not user.is_email_verified:
            raise EmailNotVerified(
                extra={"needVerification": True, "email": user.email}
            )
        if not user.is_active:
            raise Forbidden("This account has been deactivated")
        if user.is_ban_active(now):
            reason = f": {user.ban_reason}" if user.ban_reason else ""
            raise Forbidden(f"This account has been banned{reason}")

        user.login_attempts = 0
        user.lock_until = None
        user.last_login_at = now
        self._save(user)
        logger.info(f"Login successful for account {user.id}")

        return self._issue_session(user, remember_me), user

    def _register_failed_login(self, user: User, now) -> None:
        if user.lock_until and user.lock_until <= now:
            # previous lock has run out, start counting again
            user.lock_until = None
            user.login_attempts = 0

        user.login_attempts = (user.login_attempts or 0) + 1
        if user.login_attempts >= settings.max_login_attempts:
            user.lock_until = now + timedelta(minutes=settings.lockout_minutes)
            logger.warning(
                f"Account {user.id} locked after {user.login_attempts} failed logins"
            )
        else:
            logger.warning(
                f"Login failed for account {user.id} "
                f"({user.login_attempts}/{settings.max_login_attempts})"
            )
        self._save(user)

    # ------------------------------------------------------------------
    # Passwords
    # ------------------------------------------------------------------

    async def request_password_reset(self, email: str) -> str:
        """Always answers the same message whether or not the account exists."""
        user = self._find_by_email(email)
        if not user:
            return RESET_REQUESTED_MESSAGE

        reset = issue_one_time_token(self.reset_ttl)
        user.password_reset_token = reset.token
        user.password_reset_expires = reset.expires_at
        self._save(user)

        subject, html = password_reset_email(
            settings.site_name, self._link("reset-password", reset.token)
        )
        if not await self.mailer.send(user.email, subject, html):
            logger.error(f"Password reset mail for account {user.id} was not delivered")
        else:
            logger.info(f"Password reset requested for account {user.id}")

        return RESET_REQUESTED_MESSAGE

    async def reset_password(self, token: str, new_password: str) -> None:
        user = self._find_by_live_token(
            User.password_reset_token, User.password_reset_expires, token
        )
        if not user:
            raise InvalidOrExpiredToken("The reset link is invalid or has expired")

        PasswordPolicy.enforce(new_password)
        now = utcnow()
        user.hashed_password = await run_in_threadpool(
            PasswordHelper.hash_password, new_password
        )
        user.password_reset_token = None
        user.password_reset_expires = None
        user.password_changed_at = now
        self._save(user)
        logger.info(f"Password reset for account {user.id}")

        subject, html = password_changed_email(settings.site_name, now)
        await self.mailer.send(user.email, subject, html)

    async def change_password(
        self, user: User, current_password: str, new_password: str
    ) -> None:
        matched = await run_in_threadpool(
            PasswordHelper.check_password, current_password, user.hashed_password
        )
        if not matched:
            raise InvalidCredentials("Current password is incorrect")

        PasswordPolicy.enforce(new_password, field="new_password")
        user.hashed_password = await run_in_threadpool(
            PasswordHelper.hash_password, new_password
        )
        user.password_changed_at = utcnow()
        self._save(user)
        logger.info(f"Password changed for account {user.id}")

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def update_profile(
        self, user: User, bio: Optional[str] = None, avatar: Optional[str] = None
    ) -> User:
        if bio is not None:
            user.bio = bio
        if avatar is not None:
            user.avatar = avatar
        return self._save(user)
