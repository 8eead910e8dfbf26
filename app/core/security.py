# core/security.py
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from app.core.config import settings
from app.core.exceptions import InvalidToken
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)


def _from_epoch(value) -> datetime:
    return datetime.fromtimestamp(int(value), tz=timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class SessionClaims:
    """Identity asserted by a verified session token."""

    account_id: int
    username: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class OneTimeToken:
    token: str
    expires_at: datetime


class JWTManager:
    """JWT token management for authentication"""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        issuer: Optional[str] = None,
    ):
        self.secret_key = secret_key or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.issuer = issuer or settings.jwt_issuer
        self.user_token_expire = timedelta(days=settings.jwt_user_expiration)
        self.remember_token_expire = timedelta(days=settings.jwt_remember_expiration)

    def session_ttl(self, remember_me: bool = False) -> timedelta:
        return self.remember_token_expire if remember_me else self.user_token_expire

    def create_access_token(
        self,
        account_id: int,
        username: str,
        remember_me: bool = False,
        custom_expiration: Optional[timedelta] = None,
    ) -> str:
        """
        Create a signed session token for an account

        Args:
            account_id: Subject of the token
            username: Display handle embedded for convenience
            remember_me: Use the long-lived tier
            custom_expiration: Override both tiers

        Returns:
            JWT access token string
        """
        issued_at = utcnow()
        expire = issued_at + (custom_expiration or self.session_ttl(remember_me))

        payload = {
            "sub": str(account_id),
            "username": username,
            "iat": issued_at,
            "exp": expire,
            "iss": self.issuer,
            "type": "access",
        }

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.info(f"Access token created for account: {account_id}")
        return token

    def verify_token(self, token: str) -> SessionClaims:
        """
        Verify and decode a session token.

        Raises InvalidToken on a bad signature, malformed payload, wrong
        type or issuer, or expiry.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"verify_exp": True},
            )
        except JWTError as e:
            logger.warning(f"JWT verification failed: {e}")
            raise InvalidToken("Invalid or expired token")

        if payload.get("type") != "access":
            raise InvalidToken("Invalid token type")

        try:
            account_id = int(payload["sub"])
            issued_at = _from_epoch(payload["iat"])
            expires_at = _from_epoch(payload["exp"])
        except (KeyError, TypeError, ValueError):
            raise InvalidToken("Malformed token payload")

        return SessionClaims(
            account_id=account_id,
            username=payload.get("username", ""),
            issued_at=issued_at,
            expires_at=expires_at,
        )


def issue_one_time_token(ttl: timedelta) -> OneTimeToken:
    """Random single-use credential (256 bits) for verification or reset links."""
    return OneTimeToken(token=secrets.token_hex(32), expires_at=utcnow() + ttl)


def clear_expired_tokens(user, now: datetime) -> None:
    """Drop verification and reset tokens whose expiry has passed.

    Token and expiry are always cleared together.
    """
    if user.email_verify_expires is not None and user.email_verify_expires <= now:
        user.email_verify_token = None
        user.email_verify_expires = None
    if user.password_reset_expires is not None and user.password_reset_expires <= now:
        user.password_reset_token = None
        user.password_reset_expires = None


# Global instance
jwt_manager = JWTManager()
