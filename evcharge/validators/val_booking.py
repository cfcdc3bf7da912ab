from datetime import datetime
from evcharge.models.mod_booking import TIME_SLOTS, normalize_time_slot
from evcharge.schemas.sch_booking import BookingCreate
from evcharge.services.svc_errors import ValidationError

class BookingValidationError(ValidationError):
    pass

class BookingValidator:
    @staticmethod
    def validate_station_id(station_id: str):
        """Validate that a station identifier was given"""
        if not station_id or not station_id.strip():
            raise BookingValidationError("Please select a station")

    @staticmethod
    def validate_date(date: datetime):
        """Validate that a booking date was given"""
        if date is None:
            raise BookingValidationError("Please select a date")

    @staticmethod
    def validate_time_slot(time_slot: str) -> str:
        """Validate the slot label and return its canonical form"""
        if not time_slot:
            raise BookingValidationError("Please select a time slot")
        slot = normalize_time_slot(time_slot)
        if slot is None:
            raise BookingValidationError(
                f"Unknown time slot '{time_slot}'. Valid slots are {', '.join(TIME_SLOTS)}"
            )
        return slot

    @staticmethod
    def validate_slot_query(station_id: str, date: datetime, time_slot: str) -> str:
        """Validate an availability lookup and return the canonical slot"""
        BookingValidator.validate_station_id(station_id)
        BookingValidator.validate_date(date)
        return BookingValidator.validate_time_slot(time_slot)

    @staticmethod
    def validate_create_booking(booking: BookingCreate) -> str:
        """Validate all rules for creating a booking, returning the canonical slot"""
        slot = BookingValidator.validate_slot_query(booking.station_id, booking.date, booking.time_slot)
        if not booking.station_name or not booking.station_name.strip():
            raise BookingValidationError("Station name is required")
        return slot
