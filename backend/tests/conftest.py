"""
Pytest fixtures for the Credis backend tests.

Provides an in-memory database, the service container, seeded
store/owner/customer rows and an authenticated test client.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from credis import create_app
from credis.container import get_services
from credis.extensions import db
from credis.models import Customer, Store, StoreOwner
from credis.security import hash_password

OWNER_PHONE = "17000001"
OWNER_PASSWORD = "secret-pin"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'JWT_ACCESS_SECRET': 'test-access-secret',
        'JWT_REFRESH_SECRET': 'test-refresh-secret',
        'ACCESS_TOKEN_EXPIRES': timedelta(minutes=15),
        'REFRESH_TOKEN_EXPIRES': timedelta(days=7),
        'BCRYPT_ROUNDS': 4,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def services(db_session):
    return get_services()


@pytest.fixture(scope='function')
def store(db_session):
    store = Store(name="Pema General Store", phone_number="17111111", address="Norzin Lam, Thimphu")
    db_session.add(store)
    db_session.commit()
    return store


@pytest.fixture(scope='function')
def other_store(db_session):
    store = Store(name="Druk Mart", phone_number="17222222", address="Main Street, Paro")
    db_session.add(store)
    db_session.commit()
    return store


@pytest.fixture(scope='function')
def owner(db_session, store):
    owner = StoreOwner(
        name="Pema Dorji",
        phone_number=OWNER_PHONE,
        password_hash=hash_password(OWNER_PASSWORD, rounds=4),
        store_id=store.id,
    )
    db_session.add(owner)
    db_session.commit()
    return owner


@pytest.fixture(scope='function')
def customer(db_session, store):
    customer = Customer(store_id=store.id, name="Karma Wangmo", phone_number="17555555")
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture(scope='function')
def limited_customer(db_session, store):
    customer = Customer(
        store_id=store.id,
        name="Sonam Tshering",
        phone_number="17666666",
        credit_limit=Decimal("500.00"),
    )
    db_session.add(customer)
    db_session.commit()
    return customer


def login(client, phone_number: str = OWNER_PHONE, password: str = OWNER_PASSWORD):
    """Helper to log in; returns the response."""
    return client.post('/api/store-owners/login', json={
        'phoneNumber': phone_number,
        'password': password,
    })


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def auth(client, owner):
    """Authorization headers for the seeded owner."""
    response = login(client)
    assert response.status_code == 200
    return auth_headers(response.json['accessToken'])
