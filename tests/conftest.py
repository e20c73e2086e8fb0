# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ADMIN_SETUP_SECRET", "test-admin-secret")

from contentlynk.api.dependencies import get_email_service_dep, get_storage_service_dep
from contentlynk.core.security import create_access_token
from contentlynk.db.session import Base
from contentlynk.db.session import get_db as app_get_session
from contentlynk.main import app as fastapi_app
from contentlynk.models import Post, User
from contentlynk.services.email import EmailMessage, EmailResult
from contentlynk.services.post_service import create_post
from contentlynk.services.storage import StorageService

TEST_DB_URL = "sqlite://"
TEST_BUCKET = "test-bucket"

_USER_COUNTER = count(1)


class RecordingEmailService:
    """Stands in for the Resend client and keeps every message it was given."""

    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []
        self.fail = False

    @property
    def configured(self) -> bool:
        return True

    async def send(self, message: EmailMessage) -> EmailResult:
        if self.fail:
            return EmailResult(success=False, error="Email service not configured")
        self.sent.append(message)
        return EmailResult(success=True, message_id=f"test-{len(self.sent)}")

    async def close(self) -> None:
        return None


class FakeS3Client:
    """Records S3 calls made through the storage service."""

    def __init__(self) -> None:
        self.objects: dict[str, dict[str, Any]] = {}
        self.presigned: list[dict[str, Any]] = []

    def generate_presigned_url(self, ClientMethod: str, Params: dict[str, Any], ExpiresIn: int) -> str:
        self.presigned.append({"method": ClientMethod, "params": Params, "expires_in": ExpiresIn})
        return f"https://{Params['Bucket']}.s3.amazonaws.com/{Params['Key']}?signature=test"

    def put_object(self, Bucket: str, Key: str, Body: bytes, ContentType: str) -> dict[str, Any]:
        self.objects[Key] = {"bucket": Bucket, "body": Body, "content_type": ContentType}
        return {"ETag": "test"}


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest inside the test transaction.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    """Session bound to an outer transaction that is rolled back after the test.

    Commits made by the code under test only release a savepoint, so request
    handlers may commit and then open further nested transactions.
    """
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()

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


@pytest.fixture(autouse=True)
def email_outbox(app: FastAPI) -> Iterator[RecordingEmailService]:
    """Capture outgoing e-mail instead of calling the provider."""
    outbox = RecordingEmailService()
    app.dependency_overrides[get_email_service_dep] = lambda: outbox
    try:
        yield outbox
    finally:
        app.dependency_overrides.pop(get_email_service_dep, None)


@pytest.fixture()
def s3_client() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture(autouse=True)
def storage_service(app: FastAPI, s3_client: FakeS3Client) -> Iterator[StorageService]:
    """Route storage calls to an in-memory S3 stand-in."""
    service = StorageService(client=s3_client, bucket=TEST_BUCKET)
    app.dependency_overrides[get_storage_service_dep] = lambda: service
    try:
        yield service
    finally:
        app.dependency_overrides.pop(get_storage_service_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def make_user(db_session: Session, **overrides: Any) -> User:
    """Persist a user with unique defaults; keyword arguments override columns."""
    n = next(_USER_COUNTER)
    fields: dict[str, Any] = {
        "email": f"user{n}@example.com",
        "username": f"user{n}",
        "display_name": f"User {n}",
        "email_verified": True,
    }
    fields.update(overrides)
    user = User(**fields)
    db_session.add(user)
    db_session.flush()
    db_session.refresh(user)
    return user


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted test user."""
    return make_user(db_session, username="testuser", display_name="Test User")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second persisted user."""
    return make_user(db_session, username="otheruser", display_name="Other User")


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    return make_user(db_session, username="admin", display_name="Admin", is_admin=True)


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return bearer(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return bearer(other_user)


@pytest.fixture()
def admin_token(admin_user: User) -> dict[str, str]:
    return bearer(admin_user)


@pytest.fixture()
def test_post(db_session: Session, test_user: User) -> Post:
    """Create a baseline published post by the primary test user."""
    post = create_post(
        db_session,
        author_id=test_user.id,
        title="Hello World",
        content="Test post content for the feed.",
        content_type="ARTICLE",
    )
    db_session.refresh(post)
    return post


@pytest.fixture()
def user_factory(db_session: Session):
    """Return a callable creating users with unique defaults."""
    return lambda **overrides: make_user(db_session, **overrides)


@pytest.fixture()
def token_for():
    """Return a callable building bearer headers for a user."""
    return bearer
