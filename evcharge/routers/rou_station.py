from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from evcharge.configuration.database import get_db
from evcharge.dependencies.dep_auth import get_optional_caller
from evcharge.models.mod_auth import Caller
from evcharge.schemas.sch_auth import ErrorDetail
from evcharge.schemas.sch_station import StationCreate, StationResponse, StationUpdate
from evcharge.services.svc_station import StationService
from typing import List, Optional

router = APIRouter(
    prefix="/stations",
    tags=["Stations"],
    responses={404: {"model": ErrorDetail}, 503: {"model": ErrorDetail}},
)

@router.get("/", response_model=List[StationResponse])
def list_stations(
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_optional_caller)
):
    """
    List charging stations, newest first.

    - Anonymous callers and users see active stations
    - Owners see all of their own stations, including inactive ones
    """
    return StationService.list_stations(db, caller)

@router.get("/{station_id}", response_model=StationResponse)
def get_station(
    station_id: str,
    db: Session = Depends(get_db)
):
    """
    Get a charging station by its ID.
    """
    return StationService.get_station(db, station_id)

@router.post("/", response_model=StationResponse, status_code=201,
             responses={400: {"model": ErrorDetail}, 401: {"model": ErrorDetail}, 403: {"model": ErrorDetail}})
def create_station(
    station: StationCreate,
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_optional_caller)
):
    """
    Add a charging station.

    - Only owners can add stations
    - The station is owned by the caller
    """
    return StationService.create_station(db, caller, station)

@router.put("/{station_id}", response_model=StationResponse,
            responses={400: {"model": ErrorDetail}, 401: {"model": ErrorDetail}, 403: {"model": ErrorDetail}})
def update_station(
    station_id: str,
    station: StationUpdate,
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_optional_caller)
):
    """
    Update a charging station.

    - Only the fields sent are changed
    - Owners can only update their own stations
    """
    return StationService.update_station(db, caller, station_id, station)

@router.delete("/{station_id}", status_code=204,
               responses={401: {"model": ErrorDetail}, 403: {"model": ErrorDetail}})
def delete_station(
    station_id: str,
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_optional_caller)
):
    """
    Delete a charging station.

    - Owners can only delete their own stations
    - Bookings made against the station are kept

    Returns:
    - 204: Successfully deleted
    - 404: Station not found
    """
    StationService.delete_station(db, caller, station_id)
    return Response(status_code=204)
