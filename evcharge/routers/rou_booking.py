from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from evcharge.configuration.clock import now_utc
from evcharge.configuration.database import get_db
from evcharge.dependencies.dep_auth import get_optional_caller
from evcharge.models.mod_auth import Caller
from evcharge.models.mod_booking import Booking, BookingCategory, BookingListResult, time_slot_label
from evcharge.schemas.sch_auth import ErrorDetail
from evcharge.schemas.sch_booking import (
    BookingCreate,
    BookingListResponse,
    BookingMutationResponse,
    BookingResponse,
)
from evcharge.services.svc_booking import BookingService
from evcharge.services.svc_calendar import CalendarService
from evcharge.services.svc_classifier import classify_booking, partition_bookings
from evcharge.services.svc_errors import BookingNotFound
from typing import Optional
from datetime import datetime

router = APIRouter(
    prefix="/bookings",
    tags=["Bookings"],
    responses={
        401: {"model": ErrorDetail},
        404: {"model": ErrorDetail},
        503: {"model": ErrorDetail}
    },
)

def to_booking_response(booking: Booking, now: datetime) -> BookingResponse:
    return BookingResponse(
        **booking.model_dump(),
        time_slot_label=time_slot_label(booking.time_slot),
        category=classify_booking(booking, now)
    )

def to_list_response(result: BookingListResult, now: datetime) -> BookingListResponse:
    groups = partition_bookings(result.bookings, now)
    return BookingListResponse(
        bookings=[to_booking_response(booking, now) for booking in result.bookings],
        upcoming=[to_booking_response(booking, now) for booking in groups[BookingCategory.UPCOMING]],
        past=[to_booking_response(booking, now) for booking in groups[BookingCategory.PAST]],
        cancelled=[to_booking_response(booking, now) for booking in groups[BookingCategory.CANCELLED]],
        error=result.error
    )

@router.get('/', response_model=BookingListResponse)
def list_bookings(
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_optional_caller)
):
    """
    List the caller's bookings, newest date first.

    - Owners get the bookings made against the stations they own
    - Other users get their own bookings
    - Bookings are also grouped into upcoming, past and cancelled
    - If the store cannot be reached the lists are empty and `error` is set
    """
    return to_list_response(BookingService.list_bookings(db, caller), now_utc())

@router.post('/', response_model=BookingMutationResponse, status_code=201,
             responses={400: {"model": ErrorDetail}, 409: {"model": ErrorDetail}})
def reserve_slot(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_optional_caller)
):
    """
    Reserve a one-hour slot at a station.

    - The slot is re-checked before the booking is written
    - Returns 409 if the slot is already booked for that day
    - Returns the new booking and the reloaded booking list
    """
    result = BookingService.reserve_slot(db, caller, booking)
    now = now_utc()
    return BookingMutationResponse(
        booking=to_booking_response(result.booking, now),
        bookings=to_list_response(result.bookings, now),
        message="Slot booked successfully!"
    )

@router.post('/{booking_id}/cancel', response_model=BookingMutationResponse)
def cancel_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_optional_caller)
):
    """
    Cancel a booking.

    - Changes the booking status to 'cancelled'; the booking is kept
    - Cancelling an already cancelled booking succeeds and changes nothing
    - Returns the booking and the reloaded booking list
    """
    result = BookingService.cancel_booking(db, caller, booking_id)
    now = now_utc()
    message = "Booking was already cancelled" if result.already_cancelled else "Booking cancelled successfully!"
    return BookingMutationResponse(
        booking=to_booking_response(result.booking, now),
        bookings=to_list_response(result.bookings, now),
        message=message
    )

@router.get('/{booking_id}/calendar', response_class=Response,
            responses={200: {"content": {"text/calendar": {}}}})
def download_calendar_invite(
    booking_id: str,
    db: Session = Depends(get_db)
):
    """
    Download an iCalendar (.ics) invite for a booking.
    """
    booking = BookingService.get_booking(db, booking_id)
    if booking is None:
        raise BookingNotFound()
    content = CalendarService.build_booking_ics(booking, now_utc())
    return Response(
        content=content,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{CalendarService.filename(booking)}"'}
    )
