# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-jwt-secret")
os.environ.setdefault("ENCRYPTION_SECRET", "test-encryption-secret")
os.environ.setdefault("ENCRYPTION_SALT", "test-encryption-salt")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from rubin_market.core.settings import settings
from rubin_market.db.session import Base
from rubin_market.db.session import get_db as app_get_session
from rubin_market.main import app as fastapi_app
from rubin_market.models import ChatRoom, Listing, User
from rubin_market.models.listing import LISTING_STATUS_ACTIVE
from rubin_market.models.user import ROLE_MODERATOR, ROLE_PLAYER
from rubin_market.services.chat import ChatService
from rubin_market.services.cipher import CipherService, get_cipher_service
from rubin_market.services.moderation import ModerationService
from rubin_market.services.notifications import NotificationService
from rubin_market.services.reports import ReportService

TEST_DB_URL = "sqlite://"

_USER_COUNTER = count(1)
_LISTING_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
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
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit, so each test starts from empty tables instead of a rolled back savepoint.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def cipher() -> CipherService:
    """Process-wide cipher built from the test environment."""
    return get_cipher_service()


@pytest.fixture()
def notifier(db_session: Session) -> NotificationService:
    return NotificationService(db_session)


@pytest.fixture()
def chat_service(db_session: Session, cipher: CipherService, notifier: NotificationService) -> ChatService:
    return ChatService(db_session, cipher, notifier)


@pytest.fixture()
def report_service(
    db_session: Session,
    cipher: CipherService,
    notifier: NotificationService,
) -> ReportService:
    return ReportService(db_session, cipher, notifier)


@pytest.fixture()
def moderation_service(db_session: Session) -> ModerationService:
    return ModerationService(db_session)


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users."""

    def _make_user(role: str = ROLE_PLAYER, is_banned: bool = False) -> User:
        index = next(_USER_COUNTER)
        user = User(
            id=f"user-{index}",
            display_name=f"Player {index}",
            role=role,
            is_banned=is_banned,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def make_listing(db_session: Session) -> Callable[..., Listing]:
    """Return a factory that persists listings for a seller."""

    def _make_listing(seller: User, status: str = LISTING_STATUS_ACTIVE) -> Listing:
        index = next(_LISTING_COUNTER)
        listing = Listing(
            id=f"listing-{index}",
            seller_id=seller.id,
            item_name=f"Dragon Sword +{index}",
            price=1500,
            currency="gold",
            status=status,
        )
        db_session.add(listing)
        db_session.commit()
        return listing

    return _make_listing


@pytest.fixture()
def seller(make_user: Callable[..., User]) -> User:
    return make_user()


@pytest.fixture()
def buyer(make_user: Callable[..., User]) -> User:
    return make_user()


@pytest.fixture()
def outsider(make_user: Callable[..., User]) -> User:
    return make_user()


@pytest.fixture()
def moderator(make_user: Callable[..., User]) -> User:
    return make_user(role=ROLE_MODERATOR)


@pytest.fixture()
def listing(make_listing: Callable[..., Listing], seller: User) -> Listing:
    return make_listing(seller)


@pytest.fixture()
def room(chat_service: ChatService, listing: Listing, buyer: User) -> ChatRoom:
    return chat_service.create_room(listing.id, buyer.id)


def create_access_token(user_id: str) -> str:
    """Issue a bearer token the way the external auth provider does."""
    return jwt.encode({"sub": user_id}, settings.secret_key, algorithm=settings.jwt_algorithm)


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Return a helper building Authorization headers for a user."""

    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth_headers
