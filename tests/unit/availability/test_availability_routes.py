import pytest
from unittest.mock import MagicMock, patch
from fastapi.testclient import TestClient
from fastapi import FastAPI
from datetime import date, datetime, timezone

from evcharge.routers.rou_availability import router
from evcharge.configuration.database import get_db
from evcharge.services.svc_availability import AvailabilityService
from evcharge.schemas.sch_availability import AvailabilityCheck, DayAvailability, SlotAvailability

app = FastAPI()
app.include_router(router)

@pytest.fixture
def client():
    app.dependency_overrides[get_db] = lambda: MagicMock()
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def mock_availability_service():
    with patch.object(AvailabilityService, 'check_slot_availability') as mock_check, \
         patch.object(AvailabilityService, 'get_station_day_availability') as mock_day:

        yield {
            'check_slot_availability': mock_check,
            'get_station_day_availability': mock_day
        }

def test_check_slot_normalizes_label(client, mock_availability_service):
    mock_availability_service['check_slot_availability'].return_value = AvailabilityCheck(
        station_id="S1",
        date=datetime(2025, 6, 10, tzinfo=timezone.utc),
        time_slot="8:00",
        available=True
    )

    response = client.get("/availabilities/stations/S1/check",
                          params={"date": "2025-06-10T00:00:00Z", "time_slot": "08:00"})

    assert response.status_code == 200
    assert response.json()["available"] is True
    args = mock_availability_service['check_slot_availability'].call_args[0]
    assert args[1] == "S1"
    assert args[3] == "8:00"

def test_check_slot_unknown_label(client, mock_availability_service):
    response = client.get("/availabilities/stations/S1/check",
                          params={"date": "2025-06-10T00:00:00Z", "time_slot": "21:00"})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "validation_error"
    assert not mock_availability_service['check_slot_availability'].called

def test_check_slot_reports_failure(client, mock_availability_service):
    mock_availability_service['check_slot_availability'].return_value = AvailabilityCheck(
        station_id="S1",
        date=datetime(2025, 6, 10, tzinfo=timezone.utc),
        time_slot="10:00",
        available=False,
        error=AvailabilityService.CHECK_FAILED_MESSAGE
    )

    response = client.get("/availabilities/stations/S1/check",
                          params={"date": "2025-06-10T00:00:00Z", "time_slot": "10:00"})

    assert response.status_code == 200
    assert response.json()["available"] is False
    assert response.json()["error"] == AvailabilityService.CHECK_FAILED_MESSAGE

def test_check_slot_requires_date(client, mock_availability_service):
    response = client.get("/availabilities/stations/S1/check", params={"time_slot": "10:00"})

    assert response.status_code == 422

def test_day_availability(client, mock_availability_service):
    mock_availability_service['get_station_day_availability'].return_value = DayAvailability(
        station_id="S1",
        day=date(2025, 6, 10),
        slots=[
            SlotAvailability(time_slot="8:00", label="8:00 AM", available=False),
            SlotAvailability(time_slot="9:00", label="9:00 AM", available=True),
        ]
    )

    response = client.get("/availabilities/stations/S1", params={"date": "2025-06-10T09:00:00Z"})

    assert response.status_code == 200
    body = response.json()
    assert body["day"] == "2025-06-10"
    assert [slot["available"] for slot in body["slots"]] == [False, True]
