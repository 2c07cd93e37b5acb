"""Pytest fixtures for back office tests."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./.pytest-backoffice.db")
os.environ.setdefault("DISTANCE_PROVIDER", "static")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import backoffice.data.models  # noqa: F401
from backoffice.api import create_app
from backoffice.api.routers import transport
from backoffice.celery_worker import celery_app
from backoffice.data.database import Base, get_db, make_engine
from backoffice.data.seed import seed
from backoffice.domain.schemas import CustomerCreate, OrderCreate, ProductCreate
from backoffice.providers import FixedDistanceProvider
from backoffice.services.customer_service import CustomerService
from backoffice.services.order_service import OrderService
from backoffice.services.product_service import ProductService

celery_app.conf.update(task_always_eager=True, task_eager_propagates=True, task_store_eager_result=False)

SHIPPING_ADDRESS = {
    "street": "500 Industrial Way",
    "city": "Chicago",
    "state": "IL",
    "postal_code": "60601",
    "country": "USA",
}


@pytest.fixture
def engine(tmp_path):
    """SQLite file database per test (threads need a real file)."""
    eng = make_engine(f"sqlite:///{tmp_path / 'backoffice.db'}")
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    factory = sessionmaker(bind=engine, autoflush=False)
    seed(factory)
    return factory


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def distance():
    return FixedDistanceProvider(250.0)


@pytest.fixture
def client(session_factory, distance):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[transport.get_distance] = lambda: distance
    return TestClient(app)


@pytest.fixture
def customer(db):
    return CustomerService(db).create_customer(
        CustomerCreate(name="Acme Construction", email="ops@acme.test", company="Acme")
    )


def make_order_payload(customer_id, items=None, address=SHIPPING_ADDRESS, shipping_cost="0.00"):
    if items is None:
        items = [
            {"product_id": "EXC-200", "quantity": 1},
            {"product_id": "BKT-30", "quantity": 2},
        ]
    shipping = {"address": address, "method": "freight"} if address else {}
    return {
        "customer_id": customer_id,
        "items": items,
        "shipping": shipping,
        "shipping_cost": shipping_cost,
    }


@pytest.fixture
def product_factory(db):
    def _create(product_id, price="100.00", weight=None, inventory=(("WH-1", 10),), **kwargs):
        payload = ProductCreate(
            id=product_id,
            name=kwargs.pop("name", f"Product {product_id}"),
            category=kwargs.pop("category", "Attachments"),
            sku=kwargs.pop("sku", f"SKU-{product_id}"),
            price=price,
            weight=weight,
            inventory=[{"warehouse_id": wh, "quantity": qty} for wh, qty in inventory],
            **kwargs,
        )
        return ProductService(db).create_product(payload)

    return _create


@pytest.fixture
def catalog(product_factory):
    return [
        product_factory("EXC-200", price="4500.00", weight=1800, inventory=(("WH-1", 5),), name="Mini excavator"),
        product_factory("BKT-30", price="250.00", weight=45, inventory=(("WH-1", 20),), name="Bucket 30cm"),
    ]


@pytest.fixture
def order_factory(db, customer, catalog):
    def _create(**kwargs):
        payload = make_order_payload(customer.id, **kwargs)
        return OrderService(db).create_order(OrderCreate(**payload))

    return _create


@pytest.fixture
def order(order_factory):
    return order_factory()
