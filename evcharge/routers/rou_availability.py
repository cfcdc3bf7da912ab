from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from evcharge.configuration.database import get_db
from evcharge.schemas.sch_auth import ErrorDetail
from evcharge.schemas.sch_availability import AvailabilityCheck, DayAvailability
from evcharge.services.svc_availability import AvailabilityService
from evcharge.validators.val_booking import BookingValidator
from datetime import datetime

router = APIRouter(
    prefix="/availabilities",
    tags=["Availabilities"],
    responses={400: {"model": ErrorDetail}},
)

@router.get("/stations/{station_id}/check", response_model=AvailabilityCheck)
def check_slot_availability(
    station_id: str,
    date: datetime = Query(..., description="Day to check; the time of day is ignored"),
    time_slot: str = Query(..., description="Slot label, e.g. 14:00"),
    db: Session = Depends(get_db)
):
    """
    Check whether a slot is free at a station on a given day.

    - `available` is false when a confirmed booking holds the slot
    - If the check itself fails `available` is false and `error` is set
    """
    slot = BookingValidator.validate_slot_query(station_id, date, time_slot)
    return AvailabilityService.check_slot_availability(db, station_id, date, slot)

@router.get("/stations/{station_id}", response_model=DayAvailability)
def get_station_day_availability(
    station_id: str,
    date: datetime = Query(..., description="Day to list; the time of day is ignored"),
    db: Session = Depends(get_db)
):
    """
    List the twelve one-hour slots of a day with their availability.
    """
    BookingValidator.validate_station_id(station_id)
    return AvailabilityService.get_station_day_availability(db, station_id, date)
