from typing import Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import Forbidden, InvalidToken
from app.core.security import jwt_manager
from app.models.user import User
from app.services.mail import Mailer, mailer

security = HTTPBearer(auto_error=False)


def get_mailer() -> Mailer:
    return mailer


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency that requires a valid Bearer token and returns the account.
    Raises 401 if the token is missing, invalid, or the account is gone.
    """
    if not credentials:
        raise InvalidToken("Not authenticated")

    claims = jwt_manager.verify_token(credentials.credentials)
    user = db.query(User).filter(User.id == claims.account_id).first()

    if not user:
        raise InvalidToken("User not found")

    if not user.is_active:
        raise Forbidden("Inactive user")

    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Returns the account when a valid token is provided, or None otherwise.
    An invalid token is treated as an anonymous caller.
    """
    if not credentials:
        return None

    try:
        claims = jwt_manager.verify_token(credentials.credentials)
    except InvalidToken:
        return None

    user = db.query(User).filter(User.id == claims.account_id).first()
    if not user or not user.is_active:
        return None

    return user


async def get_current_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    if not current_user.is_admin:
        raise Forbidden("Admin access required")
    return current_user
