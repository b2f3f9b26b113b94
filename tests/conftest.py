"""Pytest configuration and fixtures."""

import os

# Keep the application engine away from the on-disk default database
os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models.product import Product
from models.reference import Customer, NoteType, StorageLocation, Supplier
from models.users import User
from utils.hashing import get_password_hash
from utils.tokenJWT import create_access_token

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session) -> Generator[TestClient, None, None]:
    """Test client wired to the in-memory database."""
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def user(db_session) -> User:
    u = User(
        name="Gudang Admin",
        email="admin@example.com",
        password_hash=get_password_hash("secret-password"),
        role="staff",
    )
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def auth_headers(user) -> dict:
    """Raw token in the authorization header, no scheme."""
    return {"authorization": create_access_token({"sub": str(user.id)})}


@pytest.fixture
def refs(db_session) -> dict:
    """Reference rows a ledger entry points at."""
    note_type = NoteType(name="Nota Pembelian")
    supplier = Supplier(name="PT Sumber Makmur", phone="0812-1111")
    location = StorageLocation(name="Rak A1")
    customer = Customer(name="Toko Berkah", email="berkah@example.com")
    db_session.add_all([note_type, supplier, location, customer])
    db_session.commit()
    return {
        "note_type_id": note_type.id,
        "supplier_id": supplier.id,
        "storage_location_id": location.id,
        "customer_id": customer.id,
    }


def product_payload(**overrides) -> dict:
    data = {
        "code": "A1",
        "name": "Kaos Polos",
        "product_name": "Kaos",
        "category": "Apparel",
        "variation": "Hitam / L",
        "unit": "pcs",
        "hpp_per_piece": 25000,
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_product(db_session):
    """Insert a product directly, bypassing the API."""
    def _make(code="A1", hpp=Decimal("25000"), stock_in=0, stock_out=0, **kwargs) -> Product:
        fields = dict(
            code=code,
            name=kwargs.pop("name", f"Barang {code}"),
            product_name=kwargs.pop("product_name", f"Produk {code}"),
            category=kwargs.pop("category", "Umum"),
            variation=kwargs.pop("variation", "Standar"),
            unit=kwargs.pop("unit", "pcs"),
            hpp_per_piece=hpp,
            stock_in=stock_in,
            stock_out=stock_out,
        )
        fields.update(kwargs)
        product = Product(**fields)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product
    return _make


@pytest.fixture
def get_product():
    """Read a product through a brand new session so no cached state leaks in."""
    def _get(product_id: int) -> Product:
        with TestingSessionLocal() as session:
            product = session.get(Product, product_id)
            if product is not None:
                session.expunge(product)
            return product
    return _get
