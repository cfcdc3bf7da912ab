import pytest
from unittest.mock import MagicMock, patch
from fastapi.testclient import TestClient
from fastapi import FastAPI
from datetime import datetime, timezone

from evcharge.routers.rou_station import router
from evcharge.configuration.database import get_db
from evcharge.dependencies.dep_auth import get_optional_caller
from evcharge.models.mod_auth import Caller, UserRole
from evcharge.models.mod_station import Station, VehicleType
from evcharge.services.svc_station import StationService
from evcharge.services.svc_errors import PermissionDenied, StationNotFound, StoreUnavailable

app = FastAPI()
app.include_router(router)

OWNER = Caller(id="owner789", name="Volt Hub", email="owner@example.com", role=UserRole.OWNER)

@pytest.fixture
def client():
    app.dependency_overrides[get_db] = lambda: MagicMock()
    app.dependency_overrides[get_optional_caller] = lambda: OWNER
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def mock_station_service():
    with patch.object(StationService, 'list_stations') as mock_list, \
         patch.object(StationService, 'get_station') as mock_get, \
         patch.object(StationService, 'create_station') as mock_create, \
         patch.object(StationService, 'update_station') as mock_update, \
         patch.object(StationService, 'delete_station') as mock_delete:

        yield {
            'list_stations': mock_list,
            'get_station': mock_get,
            'create_station': mock_create,
            'update_station': mock_update,
            'delete_station': mock_delete
        }

@pytest.fixture
def sample_station():
    return Station(
        id="S1",
        name="Volt Hub MG Road",
        owner_id="owner789",
        owner_name="Volt Hub",
        latitude=12.9716,
        longitude=77.5946,
        vehicle_types=[VehicleType.FOUR_WHEELER],
        price_per_hour=80.0,
        available_slots=4,
        created_at=datetime(2025, 6, 1, tzinfo=timezone.utc)
    )

@pytest.fixture
def station_payload():
    return {
        "name": "Volt Hub MG Road",
        "latitude": 12.9716,
        "longitude": 77.5946,
        "vehicle_types": ["4W"],
        "price_per_hour": 80.0,
        "available_slots": 4
    }

def test_list_stations(client, mock_station_service, sample_station):
    mock_station_service['list_stations'].return_value = [sample_station]

    response = client.get("/stations/")

    assert response.status_code == 200
    assert response.json()[0]["id"] == "S1"
    assert response.json()[0]["vehicle_types"] == ["4W"]

def test_list_stations_store_failure(client, mock_station_service):
    mock_station_service['list_stations'].side_effect = StoreUnavailable("Failed to fetch charging stations. Please try again.")

    response = client.get("/stations/")

    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "store_unavailable"

def test_get_station_not_found(client, mock_station_service):
    mock_station_service['get_station'].side_effect = StationNotFound()

    response = client.get("/stations/missing")

    assert response.status_code == 404
    assert response.json()["detail"]["message"] == "Station not found"

def test_create_station(client, mock_station_service, sample_station, station_payload):
    mock_station_service['create_station'].return_value = sample_station

    response = client.post("/stations/", json=station_payload)

    assert response.status_code == 201
    assert response.json()["owner_id"] == "owner789"
    _, caller, station = mock_station_service['create_station'].call_args[0]
    assert caller == OWNER
    assert station.vehicle_types == [VehicleType.FOUR_WHEELER]

def test_create_station_unknown_vehicle_type(client, mock_station_service, station_payload):
    station_payload["vehicle_types"] = ["3W"]

    response = client.post("/stations/", json=station_payload)

    assert response.status_code == 422
    assert not mock_station_service['create_station'].called

def test_update_station_forbidden(client, mock_station_service):
    mock_station_service['update_station'].side_effect = PermissionDenied("You can only update your own stations")

    response = client.put("/stations/S9", json={"name": "Renamed"})

    assert response.status_code == 403
    assert response.json()["detail"]["message"] == "You can only update your own stations"

def test_delete_station(client, mock_station_service):
    response = client.delete("/stations/S1")

    assert response.status_code == 204
    mock_station_service['delete_station'].assert_called_once()
