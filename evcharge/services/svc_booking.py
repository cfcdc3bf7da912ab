from typing import List, Optional
import uuid
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from evcharge.configuration.config import Config
from evcharge.configuration.clock import as_utc, local_day, now_utc
from evcharge.configuration.monitor import log_event, log_exception, log_metric, start_span
from evcharge.models.mod_auth import (
    BookingScope,
    Caller,
    OwnBookingsScope,
    OwnedStationsScope,
    resolve_booking_scope,
)
from evcharge.models.mod_booking import (
    Booking,
    BookingListResult,
    BookingStatus,
    CancellationResult,
    ReservationResult,
)
from evcharge.models.mod_tables import BookingRecord, StationRecord
from evcharge.schemas.sch_booking import BookingCreate
from evcharge.services.svc_availability import AvailabilityService
from evcharge.services.svc_errors import (
    AuthenticationRequired,
    BookingNotFound,
    PermissionDenied,
    SlotUnavailable,
    StoreUnavailable,
)
from evcharge.validators.val_booking import BookingValidator

class BookingService:
    @staticmethod
    def reserve_slot(db: Session, caller: Optional[Caller], booking: BookingCreate) -> ReservationResult:
        """
        Reserve one slot for the caller.

        The slot is re-checked right before the insert even if the client
        already checked it. The partial unique index on confirmed bookings
        rejects a concurrent reservation that slipped past the check, so the
        loser of a race gets SlotUnavailable rather than a duplicate.
        """
        if caller is None:
            raise AuthenticationRequired("You must be logged in to book a slot")

        try:
            with start_span("reserve_slot", attributes={
                "user_id": caller.id,
                "station_id": booking.station_id
            }):
                log_event("Reserve slot started", {
                    "user_id": caller.id,
                    "station_id": booking.station_id,
                    "date": booking.date.isoformat(),
                    "time_slot": booking.time_slot
                })

                time_slot = BookingValidator.validate_create_booking(booking)
                booking_date = as_utc(booking.date)

                check = AvailabilityService.check_slot_availability(
                    db, booking.station_id, booking_date, time_slot
                )
                if check.error:
                    raise StoreUnavailable(check.error)
                if not check.available:
                    log_event("Slot unavailable", {
                        "station_id": booking.station_id,
                        "date": booking_date.isoformat(),
                        "time_slot": time_slot
                    })
                    raise SlotUnavailable()

                record = BookingRecord(
                    id=str(uuid.uuid4()),
                    user_id=caller.id,
                    user_name=caller.name,
                    station_id=booking.station_id,
                    station_name=booking.station_name,
                    date=booking_date,
                    slot_day=local_day(booking_date),
                    time_slot=time_slot,
                    status=BookingStatus.CONFIRMED.value
                )
                db.add(record)
                try:
                    db.commit()
                except IntegrityError:
                    db.rollback()
                    log_event("Slot taken by a concurrent reservation", {
                        "station_id": booking.station_id,
                        "date": booking_date.isoformat(),
                        "time_slot": time_slot
                    })
                    raise SlotUnavailable()
                # Pick up the store-assigned created_at
                db.refresh(record)
                created = Booking.model_validate(record)

                log_event("Slot booked successfully", {
                    "booking_id": created.id,
                    "user_id": caller.id,
                    "station_id": created.station_id
                })

                return ReservationResult(
                    booking=created,
                    bookings=BookingService.list_bookings(db, caller)
                )
        except SQLAlchemyError as e:
            db.rollback()
            log_exception(e, {
                "operation": "reserve_slot",
                "user_id": caller.id,
                "station_id": booking.station_id
            })
            raise StoreUnavailable("Failed to book slot. Please try again.") from e
        except Exception as e:
            log_exception(e, {
                "operation": "reserve_slot",
                "user_id": caller.id,
                "station_id": booking.station_id
            })
            raise

    @staticmethod
    def get_booking(db: Session, booking_id: str) -> Optional[Booking]:
        try:
            with start_span("get_booking", attributes={"booking_id": booking_id}):
                record = db.get(BookingRecord, booking_id)
                if record is None:
                    log_event("Booking not found", {"booking_id": booking_id})
                    return None
                return Booking.model_validate(record)
        except SQLAlchemyError as e:
            log_exception(e, {"operation": "get_booking", "booking_id": booking_id})
            raise StoreUnavailable("Failed to load booking. Please try again.") from e

    @staticmethod
    def _check_cancel_permission(db: Session, caller: Caller, record: BookingRecord):
        """The booking's user or the owner of its station may cancel"""
        if record.user_id == caller.id:
            return
        station = db.get(StationRecord, record.station_id)
        if station is not None and station.owner_id == caller.id:
            return
        raise PermissionDenied("You don't have permission to cancel this booking")

    @staticmethod
    def cancel_booking(db: Session, caller: Optional[Caller], booking_id: str) -> CancellationResult:
        """
        Mark a booking as cancelled. The record is kept.

        Cancelling a booking that is already cancelled succeeds without
        writing anything.
        """
        if caller is None:
            raise AuthenticationRequired("You must be logged in to cancel a booking")

        try:
            with start_span("cancel_booking", attributes={"booking_id": booking_id}):
                log_event("Cancel booking started", {"booking_id": booking_id, "user_id": caller.id})

                record = db.get(BookingRecord, booking_id)
                if record is None:
                    log_event("Booking not found for cancellation", {"booking_id": booking_id})
                    raise BookingNotFound()

                if Config.CANCEL_REQUIRES_OWNERSHIP:
                    BookingService._check_cancel_permission(db, caller, record)

                already_cancelled = record.status == BookingStatus.CANCELLED.value
                if already_cancelled:
                    log_event("Booking already cancelled", {"booking_id": booking_id})
                else:
                    record.status = BookingStatus.CANCELLED.value
                    record.updated_at = now_utc()
                    db.commit()
                    log_event("Booking cancelled successfully", {
                        "booking_id": booking_id,
                        "user_id": caller.id,
                        "station_id": record.station_id
                    })

                return CancellationResult(
                    booking=Booking.model_validate(record),
                    already_cancelled=already_cancelled,
                    bookings=BookingService.list_bookings(db, caller)
                )
        except SQLAlchemyError as e:
            db.rollback()
            log_exception(e, {"operation": "cancel_booking", "booking_id": booking_id})
            raise StoreUnavailable("Failed to cancel booking. Please try again.") from e
        except Exception as e:
            log_exception(e, {"operation": "cancel_booking", "booking_id": booking_id})
            raise

    @staticmethod
    def _owned_station_ids(db: Session, owner_id: str) -> List[str]:
        query = select(StationRecord.id).where(StationRecord.owner_id == owner_id)
        return list(db.execute(query).scalars())

    @staticmethod
    def _fetch_bookings(db: Session, *conditions) -> List[Booking]:
        query = select(BookingRecord).where(*conditions).order_by(BookingRecord.date.desc())
        return [Booking.model_validate(record) for record in db.execute(query).scalars()]

    @staticmethod
    def _bookings_in_scope(db: Session, scope: BookingScope) -> List[Booking]:
        if isinstance(scope, OwnedStationsScope):
            station_ids = BookingService._owned_station_ids(db, scope.owner_id)
            if not station_ids:
                return []
            return BookingService._fetch_bookings(db, BookingRecord.station_id.in_(station_ids))
        if isinstance(scope, OwnBookingsScope):
            return BookingService._fetch_bookings(db, BookingRecord.user_id == scope.user_id)
        raise TypeError(f"Unsupported booking scope: {scope!r}")

    @staticmethod
    def list_bookings(db: Session, caller: Optional[Caller]) -> BookingListResult:
        """
        Bookings visible to the caller, newest date first.

        Owners see the bookings made against their stations, everyone else
        sees their own. A store failure yields an empty list and an error
        message so the list view can still render.
        """
        if caller is None:
            raise AuthenticationRequired("You must be logged in to view bookings")

        scope = resolve_booking_scope(caller)
        try:
            with start_span("list_bookings", attributes={"user_id": caller.id, "scope": scope.kind}):
                log_event("Retrieving bookings", {"user_id": caller.id, "scope": scope.kind})

                bookings = BookingService._bookings_in_scope(db, scope)

                log_metric("bookings_listed", len(bookings), {"user_id": caller.id, "scope": scope.kind})
                return BookingListResult(bookings=bookings)
        except SQLAlchemyError as e:
            db.rollback()
            log_exception(e, {"operation": "list_bookings", "user_id": caller.id})
            return BookingListResult(bookings=[], error="Failed to fetch bookings. Please try again.")
