# tests/conftest.py
import os
from typing import Iterator, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["MAIL_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret"

from app.core.database import Base, get_db  # noqa: E402
from app.core.dependencies import get_mailer  # noqa: E402
from app.core.hasher import PasswordHelper  # noqa: E402
from app.core.security import jwt_manager  # noqa: E402
from app.models import Category, Post, User  # noqa: E402
from main import app  # noqa: E402

DEFAULT_PASSWORD = "secret123"


class FakeMailer:
    """Records outgoing mail instead of talking to SMTP"""

    def __init__(self):
        self.sent: List[dict] = []
        self.fail = False

    async def send(self, to: str, subject: str, html: str) -> bool:
        if self.fail:
            return False
        self.sent.append({"to": to, "subject": subject, "html": html})
        return True


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture()
def client(db_session: Session, mailer: FakeMailer) -> Iterator[TestClient]:
    def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override
    app.dependency_overrides[get_mailer] = lambda: mailer
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ==================== Data helpers ====================


def create_user(
    db: Session,
    username: str = "alice",
    email: str = "alice@example.com",
    password: str = DEFAULT_PASSWORD,
    is_admin: bool = False,
    verified: bool = True,
) -> User:
    user = User(
        username=username,
        email=email,
        hashed_password=PasswordHelper.hash_password(password),
        is_admin=is_admin,
        is_email_verified=verified,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User, remember_me: bool = False) -> dict:
    token = jwt_manager.create_access_token(user.id, user.username, remember_me)
    return {"Authorization": f"Bearer {token}"}


def create_category(db: Session, name: str = "Tech", color: str = "#007bff") -> Category:
    category = Category(name=name, color=color)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def create_post(
    db: Session,
    author: User,
    category: Category,
    title: str = "Hello",
    content: str = "<p>Hello world</p>",
    published: bool = True,
    summary: Optional[str] = None,
) -> Post:
    from app.schemas.post import PostCreate
    from app.services.post import PostService

    post_in = PostCreate(
        title=title,
        content=content,
        summary=summary,
        category_id=category.id,
        is_published=published,
    )
    return PostService(db).create_post(post_in, author)


@pytest.fixture()
def user(db_session: Session) -> User:
    return create_user(db_session)


@pytest.fixture()
def admin(db_session: Session) -> User:
    return create_user(
        db_session, username="admin", email="admin@example.com", is_admin=True
    )


@pytest.fixture()
def category(db_session: Session) -> Category:
    return create_category(db_session)
