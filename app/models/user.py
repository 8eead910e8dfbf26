from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from app.core.database import Base
from app.utils.clock import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Credentials
    username = Column(String(20), unique=True, index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    avatar = Column(Text, nullable=True)
    bio = Column(String(500), nullable=True)

    # Roles & status
    is_admin = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_banned = Column(Boolean, default=False, nullable=False)
    ban_reason = Column(String(255), nullable=True)
    ban_expires = Column(DateTime, nullable=True)

    # E-mail verification
    is_email_verified = Column(Boolean, default=False, nullable=False)
    email_verify_token = Column(String(64), index=True, nullable=True)
    email_verify_expires = Column(DateTime, nullable=True)

    # Password reset
    password_reset_token = Column(String(64), index=True, nullable=True)
    password_reset_expires = Column(DateTime, nullable=True)
    password_changed_at = Column(DateTime, nullable=True)

    # Login tracking
    last_login_at = Column(DateTime, nullable=True)
    login_attempts = Column(Integer, default=0, nullable=False)
    lock_until = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def is_locked(self, now=None) -> bool:
        return bool(self.lock_until and self.lock_until > (now or utcnow()))

    def is_ban_active(self, now=None) -> bool:
        if not self.is_banned:
            return False
        # a ban without an expiry is permanent
        return self.ban_expires is None or self.ban_expires > (now or utcnow())

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
