"""
Shared fixtures: in-memory SQLite, fake asset host and mailer, one
TestClient per logged-in user.

    pytest -q
"""
import io
from typing import List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from yelpcamp.api.deps import get_asset_host, get_mailer
from yelpcamp.assets import UploadedAsset
from yelpcamp.core.config import Settings, get_settings
from yelpcamp.db import models  # noqa: F401
from yelpcamp.db.base import Base
from yelpcamp.db.session import get_db
from yelpcamp.errors import AssetHostError, MailError
from yelpcamp.main import create_application

ADMIN_CODE = "letmein"


class FakeAssetHost:
    def __init__(self):
        self.uploads: List[str] = []
        self.destroyed: List[str] = []
        self.fail_upload: Optional[str] = None
        self.fail_destroy: Optional[str] = None

    def upload(self, filename: str, content: bytes) -> UploadedAsset:
        if self.fail_upload:
            raise AssetHostError(self.fail_upload)
        self.uploads.append(filename)
        n = len(self.uploads)
        return UploadedAsset(url=f"https://img.test/{n}/{filename}", asset_id=f"asset-{n}")

    def destroy(self, asset_id: str) -> None:
        if self.fail_destroy:
            raise AssetHostError(self.fail_destroy)
        self.destroyed.append(asset_id)


class FakeMailer:
    def __init__(self):
        self.sent: List[Tuple[str, Optional[str], str]] = []
        self.fail: Optional[str] = None

    def send(self, to, subject, body):
        if self.fail:
            raise MailError(self.fail)
        self.sent.append((to, subject, body))


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def asset_host():
    return FakeAssetHost()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def app(session_factory, asset_host, mailer):
    application = create_application()

    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    application.dependency_overrides[get_db] = _get_db
    application.dependency_overrides[get_asset_host] = lambda: asset_host
    application.dependency_overrides[get_mailer] = lambda: mailer
    application.dependency_overrides[get_settings] = lambda: Settings(ADMIN_CODE=ADMIN_CODE)
    return application


@pytest.fixture
def make_client(app):
    def _make() -> TestClient:
        return TestClient(app)
    return _make


@pytest.fixture
def client(make_client):
    return make_client()


def image_file(name: str = "tent.jpg"):
    return {"image": (name, io.BytesIO(b"\xff\xd8\xff fake jpeg"), "image/jpeg")}


def register(client: TestClient, username: str, password: str = "secret", admin_code: str = "", email=None):
    return client.post(
        "/register",
        data={
            "username": username,
            "password": password,
            "email": email or f"{username}@example.com",
            "first_name": username.title(),
            "admin_code": admin_code,
        },
        follow_redirects=False,
    )


def create_campground(client: TestClient, name: str = "Granite Hill", filename: str = "tent.jpg"):
    return client.post(
        "/campgrounds",
        data={"name": name, "price": "9.00", "location": "Utah", "description": "rocks"},
        files=image_file(filename),
        follow_redirects=False,
    )


@pytest.fixture
def login_as(make_client):
    """Register `username` on a fresh client and return that client (logged in)."""
    def _login(username: str, admin: bool = False) -> TestClient:
        c = make_client()
        resp = register(c, username, admin_code=ADMIN_CODE if admin else "")
        assert resp.status_code == 302
        return c
    return _login
