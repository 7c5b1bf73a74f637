"""Pytest configuration and fixtures."""

import os

# Must be set before the app module builds its engine
os.environ["DATABASE_URL"] = "sqlite://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from crypto_ramp_service.app.db.base import Base
from crypto_ramp_service.app.db.session import get_db
from crypto_ramp_service.app.main import app
from crypto_ramp_service.app.models.transaction import Transaction
from crypto_ramp_service.app.models.user import User
from crypto_ramp_service.app.schemas.moonpay import RemoteStatus, RemoteTransaction
from crypto_ramp_service.app.services.moonpay_service import get_moonpay_client


class FakeMoonPayClient:
    """Stands in for MoonPayClient and records every call."""

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self.created = []
        self.fetched = []
        # (id, status, moonpay_transaction_id) of every local row at create time
        self.rows_at_create = []

        self.create_result = RemoteTransaction(
            external_id="ext_1",
            status="waitingPayment",
            redirect_url="https://pay/ext_1",
        )
        self.create_error = None
        self.fetch_result = RemoteStatus(status="completed", crypto_amount=Decimal("0.0012"))
        self.fetch_error = None

    async def create_remote_transaction(self, request):
        self.created.append(request)
        session = self.session_factory()
        try:
            self.rows_at_create = [
                (t.id, t.status, t.moonpay_transaction_id)
                for t in session.query(Transaction).all()
            ]
        finally:
            session.close()

        if self.create_error:
            raise self.create_error
        return self.create_result

    async def fetch_remote_transaction(self, external_id):
        self.fetched.append(external_id)
        if self.fetch_error:
            raise self.fetch_error
        return self.fetch_result


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def moonpay(session_factory):
    return FakeMoonPayClient(session_factory)


@pytest.fixture
def client(session_factory, moonpay):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_moonpay_client] = lambda: moonpay
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def user(db):
    u = User(
        first_name="John",
        last_name="Doe",
        email="john@example.com",
        phone="+254712345678",
        id_number="12345678",
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def make_transaction(db, user):
    def _make(**overrides):
        fields = {
            "user_id": user.id,
            "amount": Decimal("5000"),
            "currency": "KES",
            "crypto_currency": "btc",
            "payment_method": "mobile_money",
            "status": "pending",
        }
        fields.update(overrides)
        txn = Transaction(**fields)
        db.add(txn)
        db.commit()
        db.refresh(txn)
        return txn

    return _make


def load_transactions(session_factory):
    session = session_factory()
    try:
        return session.query(Transaction).order_by(Transaction.id).all()
    finally:
        session.close()


@pytest.fixture
def stored(session_factory):
    """Returns a callable that reads every transaction row through a fresh session."""
    return lambda: load_transactions(session_factory)
