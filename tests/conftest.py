"""Pytest configuration and fixtures"""
import os
import tempfile

import pytest

# Set test environment variables (before any project import reads settings)
_TMP_DIR = tempfile.mkdtemp(prefix="qkart-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'qkart.db')}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["CHECKOUT_MULTIPLY_QUANTITY"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient  # noqa: E402

import main  # noqa: E402  (registers every model on Base)
from config.database import Base, SessionLocal, engine  # noqa: E402
from modules.catalog.models import Product  # noqa: E402
from modules.user.service import user_service  # noqa: E402

PASSWORD = "correct-horse-battery"
SHIPPING_ADDRESS = "221B Baker Street, London"


@pytest.fixture(autouse=True)
def _schema():
    """Fresh tables for every test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    """Database session for the test body"""
    session = SessionLocal()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def make_user(db):
    """Factory: persisted user with a shipping address unless told otherwise"""
    def _make(email="shopper@example.com", wallet_money=500, address=SHIPPING_ADDRESS, name="Shopper"):
        user = user_service.create_user(
            db, name=name, email=email, password=PASSWORD,
            wallet_money=wallet_money, address=address,
        )
        db.commit()
        return user
    return _make


@pytest.fixture
def user(make_user):
    """Shopper with 500 in the wallet and a configured address"""
    return make_user()


@pytest.fixture
def products(db):
    """Three catalog products costing 100, 250 and 400"""
    items = [
        Product(name="UNIFACTOR Mens Running Shoes", category="Fashion", cost=100, rating=5, image="shoes.png"),
        Product(name="YONEX Badminton Racquet", category="Sports", cost=250, rating=4, image="racquet.png"),
        Product(name="Tan Leatherette Weekender", category="Fashion", cost=400, rating=4, image="bag.png"),
    ]
    db.add_all(items)
    db.commit()
    return items


@pytest.fixture
def client():
    """FastAPI test client"""
    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def auth_headers(client, user):
    """Bearer header for the default user"""
    r = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['token']}"}
