"""
Pytest configuration and shared fixtures.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret")

from datetime import time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from localli.auth import token_for
from localli.core import (
    Actor,
    BookingLedger,
    BusinessDirectory,
    InMemoryEventQueue,
    ReservationService,
    ROLE_CUSTOMER,
    ROLE_OWNER,
)
from localli.db import init_db, make_engine
from localli.main import create_app
from localli.models import Business

OWNER_ID = 1
OTHER_OWNER_ID = 2
CUSTOMER_ID = 10
OTHER_CUSTOMER_ID = 11

DAY = "2024-05-01"


@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """File-backed database, for tests where several sessions or threads race."""
    engine = make_engine(f"sqlite:///{tmp_path / 'race.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def business(session):
    """Open 11:00-14:00 with one-hour slots."""
    business = Business(
        name="Corner Barber",
        owner_id=OWNER_ID,
        open_time=time(11, 0),
        close_time=time(14, 0),
        slot_minutes=60,
    )
    session.add(business)
    session.commit()
    session.refresh(business)
    return business


@pytest.fixture
def events():
    return InMemoryEventQueue()


@pytest.fixture
def ledger(session):
    return BookingLedger(session)


@pytest.fixture
def service(session, events):
    return ReservationService(
        ledger=BookingLedger(session),
        businesses=BusinessDirectory(session),
        events=events,
    )


@pytest.fixture
def owner():
    return Actor(id=OWNER_ID, role=ROLE_OWNER)


@pytest.fixture
def other_owner():
    return Actor(id=OTHER_OWNER_ID, role=ROLE_OWNER)


@pytest.fixture
def customer():
    return Actor(id=CUSTOMER_ID, role=ROLE_CUSTOMER)


@pytest.fixture
def other_customer():
    return Actor(id=OTHER_CUSTOMER_ID, role=ROLE_CUSTOMER)


@pytest.fixture
def client(engine, events):
    app = create_app(engine=engine, events=events)
    with TestClient(app) as client:
        yield client


def auth_headers(user_id: int, role: str) -> dict:
    return {"Authorization": f"Bearer {token_for(user_id, role)}"}


@pytest.fixture
def auth():
    return auth_headers
