from datetime import datetime
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from evcharge.configuration.clock import local_day, local_day_bounds
from evcharge.configuration.monitor import log_event, log_exception, start_span
from evcharge.models.mod_booking import BookingStatus, TIME_SLOTS, time_slot_label
from evcharge.models.mod_tables import BookingRecord
from evcharge.schemas.sch_availability import AvailabilityCheck, DayAvailability, SlotAvailability

class AvailabilityService:
    CHECK_FAILED_MESSAGE = "Failed to check slot availability. Please try again."

    @staticmethod
    def _confirmed_on_day(station_id: str, date: datetime):
        """Confirmed bookings of a station within the local calendar day of `date`"""
        day_start, day_end = local_day_bounds(date)
        return (
            select(BookingRecord.time_slot)
            .where(BookingRecord.station_id == station_id)
            .where(BookingRecord.date >= day_start)
            .where(BookingRecord.date <= day_end)
            .where(BookingRecord.status == BookingStatus.CONFIRMED.value)
        )

    @staticmethod
    def check_slot_availability(db: Session, station_id: str, date: datetime, time_slot: str) -> AvailabilityCheck:
        """
        Check whether a slot can still be booked.

        A failed lookup reports the slot as unavailable together with an
        error message; it never reports a slot as free without having read
        the store.
        """
        try:
            with start_span("check_slot_availability", attributes={
                "station_id": station_id,
                "time_slot": time_slot
            }):
                query = AvailabilityService._confirmed_on_day(station_id, date).where(
                    BookingRecord.time_slot == time_slot
                ).limit(1)
                taken = db.execute(query).first() is not None

                log_event("Slot availability checked", {
                    "station_id": station_id,
                    "date": date.isoformat(),
                    "time_slot": time_slot,
                    "available": not taken
                })
                return AvailabilityCheck(
                    station_id=station_id,
                    date=date,
                    time_slot=time_slot,
                    available=not taken
                )
        except SQLAlchemyError as e:
            log_exception(e, {
                "operation": "check_slot_availability",
                "station_id": station_id,
                "time_slot": time_slot
            })
            return AvailabilityCheck(
                station_id=station_id,
                date=date,
                time_slot=time_slot,
                available=False,
                error=AvailabilityService.CHECK_FAILED_MESSAGE
            )

    @staticmethod
    def is_slot_available(db: Session, station_id: str, date: datetime, time_slot: str) -> bool:
        return AvailabilityService.check_slot_availability(db, station_id, date, time_slot).available

    @staticmethod
    def get_station_day_availability(db: Session, station_id: str, date: datetime) -> DayAvailability:
        """Availability of every slot of one day, read with a single query"""
        day = local_day(date)
        try:
            with start_span("get_station_day_availability", attributes={"station_id": station_id}):
                taken = set(db.execute(AvailabilityService._confirmed_on_day(station_id, date)).scalars())

                log_event("Station day availability retrieved", {
                    "station_id": station_id,
                    "day": day.isoformat(),
                    "booked": len(taken)
                })
                return DayAvailability(
                    station_id=station_id,
                    day=day,
                    slots=[
                        SlotAvailability(time_slot=slot, label=time_slot_label(slot), available=slot not in taken)
                        for slot in TIME_SLOTS
                    ]
                )
        except SQLAlchemyError as e:
            log_exception(e, {"operation": "get_station_day_availability", "station_id": station_id})
            return DayAvailability(
                station_id=station_id,
                day=day,
                slots=[
                    SlotAvailability(time_slot=slot, label=time_slot_label(slot), available=False)
                    for slot in TIME_SLOTS
                ],
                error=AvailabilityService.CHECK_FAILED_MESSAGE
            )
