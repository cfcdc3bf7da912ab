import pytest
from unittest.mock import patch
from datetime import datetime, timezone
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from evcharge.configuration.config import Config
from evcharge.configuration.database import SessionLocal, init_db
from evcharge.models.mod_auth import Caller, UserRole
from evcharge.models.mod_tables import StationRecord


@pytest.fixture(autouse=True)
def default_config():
    with patch.object(Config, "LOCAL_TIMEZONE", "UTC"), \
         patch.object(Config, "CANCEL_REQUIRES_OWNERSHIP", False):
        yield


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = SessionLocal(bind=engine)
    yield session
    session.close()


@pytest.fixture
def user_caller():
    return Caller(id="user123", name="Asha Rao", email="asha@example.com", role=UserRole.USER)


@pytest.fixture
def other_caller():
    return Caller(id="user456", name="Ben Okafor", email="ben@example.com", role=UserRole.USER)


@pytest.fixture
def owner_caller():
    return Caller(id="owner789", name="Volt Hub", email="owner@example.com", role=UserRole.OWNER)


@pytest.fixture
def add_station(db):
    def _add_station(station_id, owner_id, name=None, is_active=True):
        record = StationRecord(
            id=station_id,
            name=name or f"Station {station_id}",
            owner_id=owner_id,
            owner_name="Owner",
            latitude=12.97,
            longitude=77.59,
            vehicle_types=["2W", "4W"],
            price_per_hour=50.0,
            available_slots=2,
            description="",
            address="MG Road",
            is_active=is_active,
            is_public=True,
        )
        db.add(record)
        db.commit()
        return record
    return _add_station


@pytest.fixture
def booking_day():
    return datetime(2025, 6, 10, tzinfo=timezone.utc)
