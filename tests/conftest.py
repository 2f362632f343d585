"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Each test gets fresh tables that are
dropped after the test.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from shop_wallet.main import app
from shop_wallet.models import Base
from shop_wallet.models.base import get_db
from shop_wallet.models.enums import OrderStatus
from shop_wallet.schemas.order import PurchaseItem, ShippingAddress
from shop_wallet.schemas.product import ProductCreate
from shop_wallet.services.account_service import AccountService
from shop_wallet.services.order_service import OrderService
from shop_wallet.services.product_service import ProductService
from shop_wallet.services.wallet_service import WalletService


# SQLite file database, no external database needed, and a
# file (not :memory:) so several sessions can share it.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def session_factory():
    """Open extra sessions, e.g. to play a second concurrent request."""
    sessions = []

    def make():
        session = TestSessionLocal()
        sessions.append(session)
        return session

    yield make
    for session in sessions:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so the app uses the
    test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# --- Helpers ---

ADDRESS = ShippingAddress(
    street="ul. Marszalkowska 1",
    city="Warszawa",
    postal_code="00-001",
    country="Polska",
)


def open_wallet(db_session, user_id=1, deposit=None):
    """Helper: open a wallet, optionally fund it, and commit."""
    account = AccountService(db_session).open_account(user_id)
    db_session.commit()
    if deposit is not None:
        WalletService(db_session).deposit(user_id, Decimal(deposit))
        db_session.commit()
    return account


def create_product(db_session, price="10.00", offer_price=None, name="Mug", category="kitchen"):
    """Helper: create a product and commit."""
    product = ProductService(db_session).create_product(ProductCreate(
        name=name,
        category=category,
        description="",
        price=Decimal(price),
        offer_price=Decimal(offer_price) if offer_price is not None else None,
    ))
    db_session.commit()
    return product


def buy(db_session, user_id, *lines, address=ADDRESS):
    """Helper: purchase (product, quantity) pairs and commit."""
    result = WalletService(db_session).purchase(
        user_id,
        [PurchaseItem(product_id=p.id, quantity=q) for p, q in lines],
        address,
    )
    db_session.commit()
    return result


def deliver(db_session, order):
    """Helper: walk an order through fulfilment to delivered and commit."""
    service = OrderService(db_session)
    for status in (OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED):
        service.advance_status(order.id, status)
    db_session.commit()
