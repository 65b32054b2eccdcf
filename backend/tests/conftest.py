"""
Pytest configuration and fixtures for backend tests.
"""

import os
import tempfile

# Point the app at throwaway storage before anything reads the settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="store-uploads-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from config import settings
from database import Base, get_db
from models.category import Category
from models.product import Product
from utils.seed_catalog import seed_catalog
from utils.tokenJWT import create_access_token


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def catalog(db_session):
    """Seed the starter catalog and return products keyed by slug."""
    seed_catalog(db_session)
    return {p.slug: p for p in db_session.query(Product).all()}


@pytest.fixture
def fridge(catalog):
    return catalog["hotpoint-250l-double-door-fridge"]


@pytest.fixture
def kettle(catalog):
    return catalog["sayona-1-7l-cordless-kettle"]


@pytest.fixture
def category(db_session, catalog):
    return db_session.query(Category).filter(Category.slug == "kitchen-appliances").first()


@pytest.fixture
def auth_headers():
    """Bearer header for the configured back-office account."""
    token = create_access_token(data={"sub": settings.ADMIN_USERNAME, "role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Isolate image uploads in a per-test directory."""
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path
