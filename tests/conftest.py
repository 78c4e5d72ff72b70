"""
Shared fixtures for the cart service tests.

Environment is set before anything under app/ is imported, because
settings and the engine are created at import time.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DB_REQUIRE_SSL", "false")

import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.database import get_session
from app.main import app
from app.models.product import Product
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.services.cart_service import CartService

TEST_SECRET = os.environ["JWT_SECRET"]


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def alice(session) -> User:
    user = User(id=uuid.uuid4(), email="alice@example.com", name="alice")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def bob(session) -> User:
    user = User(id=uuid.uuid4(), email="bob@example.com", name="bob")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def cake(session) -> Product:
    product = Product(
        name="Chocolate cake",
        price=Decimal("10.00"),
        image_url="https://cdn.example.com/cake.png",
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@pytest.fixture
def tart(session) -> Product:
    product = Product(name="Lemon tart", price=Decimal("4.50"))
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@pytest.fixture
def cart_service() -> CartService:
    return CartService(CartRepository(), ProductRepository())


def make_token(user_id: uuid.UUID, email: str) -> str:
    return jwt.encode({"sub": str(user_id), "email": email}, TEST_SECRET, algorithm="HS256")


def auth_header(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user.id, user.email)}"}


@pytest.fixture
def test_client(engine):
    """
    TestClient bound to the per-test database.
    Auth runs for real: requests carry HS256 tokens signed with TEST_SECRET.
    """

    def _get_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def headers_for():
    """Build an Authorization header for a user."""
    return auth_header
