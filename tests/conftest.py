import os
import sys
import logging
from datetime import datetime
from typing import Optional

# Must be set before the app modules read their configuration
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTO_SEED", "0")

import pytest
from fastapi.testclient import TestClient

from chapa_quente.database import auto_migrate, create_db_engine, make_session_factory
from chapa_quente.main import app
from chapa_quente.models import Order, OrderItem, Product, Stock, User, utcnow
from chapa_quente.security import create_access_token, hash_password


# =========================
# Logging -> stdout
# =========================
@pytest.fixture(scope="session", autouse=True)
def _tests_log_to_stdout():
    root = logging.getLogger()
    if not any(getattr(h, "stream", None) is sys.stdout for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(os.getenv("TEST_LOG_LEVEL", "INFO").upper())


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


# =========================
# Database / app
# =========================
@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    auto_migrate(engine, seed=False)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def client(session_factory):
    app.state.session_factory = session_factory
    yield TestClient(app)
    del app.state.session_factory


# =========================
# Factories
# =========================
def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def make_user(session_factory):
    def _make(
        name: str = "Maria",
        email: str = "maria@example.com",
        password: str = "secret123",
        is_admin: bool = False,
        loyalty_points: int = 0,
    ) -> User:
        with session_factory() as s:
            user = User(
                name=name,
                email=email.lower(),
                password_hash=hash_password(password),
                is_admin=is_admin,
                loyalty_points=loyalty_points,
            )
            s.add(user)
            s.commit()
            return user
    return _make


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", email="admin@example.com", is_admin=True)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def customer(make_user):
    return make_user()


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def make_product(session_factory):
    def _make(
        name: str = "Clássico Imperial",
        price: float = 28.90,
        category: str = "hot_dog",
        quantity: Optional[int] = 50,
        is_active: bool = True,
        tags: Optional[list] = None,
    ) -> int:
        with session_factory() as s:
            product = Product(name=name, price=price, category=category, is_active=is_active, tags=tags or [])
            if quantity is not None:
                product.stock = Stock(quantity=quantity)
            s.add(product)
            s.commit()
            return product.id
    return _make


@pytest.fixture
def make_order(session_factory):
    """Insert an order row directly, bypassing checkout."""
    counter = {"n": 0}

    def _make(
        status: str = "received",
        total: float = 10.0,
        created_at: Optional[datetime] = None,
        user_id: Optional[str] = None,
        customer_name: str = "Walk-in",
    ) -> str:
        counter["n"] += 1
        order_id = f"T{counter['n']:06d}"
        with session_factory() as s:
            order = Order(
                id=order_id,
                user_id=user_id,
                customer_name=customer_name,
                status=status,
                total=total,
                queue_position=counter["n"],
                created_at=created_at or utcnow(),
            )
            order.items.append(OrderItem(product_name="Hot dog", quantity=1, unit_price=total))
            s.add(order)
            s.commit()
        return order_id
    return _make


@pytest.fixture
def stock_of(session_factory):
    def _get(product_id: int) -> Optional[int]:
        with session_factory() as s:
            stock = s.get(Stock, product_id)
            return stock.quantity if stock is not None else None
    return _get


@pytest.fixture
def points_of(session_factory):
    def _get(user_id: str) -> int:
        with session_factory() as s:
            return s.get(User, user_id).loyalty_points
    return _get


def order_payload(**overrides) -> dict:
    payload = {
        "customer_name": "Maria",
        "items": [
            {"product_id": None, "product_name": "Hot dog da casa", "quantity": 1, "unit_price": 20.0},
        ],
        "total": 20.0,
        "delivery_mode": "pickup",
        "payment_method": "pix",
    }
    payload.update(overrides)
    return payload
