import os

# Must be set before storefront is imported: the module-level app is built
# from the environment at import time.
os.environ["APP_ENV"] = "development"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from storefront.config import Settings  # noqa: E402
from storefront.main import create_app  # noqa: E402
from storefront.services.image_storage import ImageStorage  # noqa: E402
from storefront.services.token_service import TokenService  # noqa: E402

TEST_DATABASE_URL = "sqlite:///:memory:"
ADMIN_USERNAME = "owner"
ADMIN_PASSWORD = "correct-horse-battery"
JWT_SECRET = "test-secret-0123456789abcdef0123456789abcdef"


class InMemoryImageStorage(ImageStorage):
    """Object store stand-in that keeps uploads in a dict."""

    folder = "products-services"
    public_base_url = "https://cdn.example.test/storage/v1/object/public/images"

    def __init__(self):
        self.objects = {}

    def upload(self, data: bytes, key: str, content_type: str) -> str:
        self.objects[key] = (data, content_type)
        return self.public_url(key)

    def remove(self, key: str) -> None:
        self.objects.pop(key, None)


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings(
        jwt_secret=JWT_SECRET,
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
        token_expiry_seconds=7 * 24 * 60 * 60,
        database_url=TEST_DATABASE_URL,
    )


@pytest.fixture(name="token_service")
def token_service_fixture(settings: Settings):
    return TokenService(settings.jwt_secret, settings.token_expiry_seconds)


@pytest.fixture(name="engine")
def engine_fixture():
    """Fresh in-memory database per test.

    StaticPool makes every session share the single :memory: connection;
    check_same_thread=False is required for TestClient's worker thread.
    """
    from storefront.models.content import Product, Service  # noqa: F401

    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="image_storage")
def image_storage_fixture():
    return InMemoryImageStorage()


@pytest.fixture(name="app")
def app_fixture(settings: Settings, engine, image_storage):
    """App wired to the test database and the in-memory image store"""
    return create_app(settings, image_storage=image_storage, engine=engine)


@pytest.fixture(name="client")
def client_fixture(app):
    """Anonymous client (no session cookie)"""
    with TestClient(app) as client:
        yield client


@pytest.fixture(name="admin_client")
def admin_client_fixture(app):
    """Client that has logged in and carries the admin session cookie"""
    with TestClient(app) as client:
        response = client.post(
            "/api/auth/login",
            json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
        )
        assert response.status_code == 200
        yield client
