"""
Application initialization module
Handles initial setup tasks like creating the default admin and categories
"""

import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.hasher import PasswordHelper
from app.models.category import Category
from app.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "技术分享", "description": "技术相关的文章和教程", "color": "#007bff"},
    {"name": "生活随笔", "description": "日常生活的感悟和记录", "color": "#28a745"},
    {"name": "学习笔记", "description": "学习过程中的笔记和总结", "color": "#ffc107"},
    {"name": "项目展示", "description": "个人项目的展示和分享", "color": "#dc3545"},
]


def init_admin(db: Session) -> None:
    """
    Create the default admin account if no admin exists yet.

    Credentials come from settings (config.py). The account is created
    already verified so it can log in right away.
    """
    try:
        existing_admin = db.query(User).filter(User.is_admin.is_(True)).first()

        if existing_admin:
            logger.info(
                f"Admin user already exists (ID: {existing_admin.id}, Username: {existing_admin.username})"
            )
            return

        admin = User(
            username=settings.admin_default_username,
            email=settings.admin_default_email.lower(),
            hashed_password=PasswordHelper.hash_password(
                settings.admin_default_password
            ),
            bio=settings.admin_default_bio,
            is_admin=True,
            is_email_verified=True,
        )

        db.add(admin)
        db.commit()
        db.refresh(admin)

        logger.info("=" * 60)
        logger.info("DEFAULT ADMIN CREATED")
        logger.info(f"Username: {admin.username}")
        logger.info(f"Email: {admin.email}")
        logger.info("=" * 60)
        logger.warning("Change the default admin password immediately!")

    except Exception as e:
        logger.error(f"Failed to initialize admin: {e}")
        db.rollback()
        raise


def init_categories(db: Session) -> None:
    """Seed the default categories when the table is empty."""
    try:
        if db.query(Category).first():
            return

        for data in DEFAULT_CATEGORIES:
            db.add(Category(**data))
        db.commit()

        logger.info(f"Created {len(DEFAULT_CATEGORIES)} default categories")

    except Exception as e:
        logger.error(f"Failed to initialize categories: {e}")
        db.rollback()
        raise


def initialize_application(db: Session) -> None:
    """
    Run all application initialization tasks.

    Args:
        db: Database session
    """
    logger.info("Starting application initialization...")

    init_admin(db)
    init_categories(db)

    logger.info("Application initialization completed")
