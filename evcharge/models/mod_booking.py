from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from enum import Enum

# Twelve one-hour slots per station per day, 8:00 AM to 8:00 PM
SLOT_START_HOUR = 8
SLOT_END_HOUR = 20
TIME_SLOTS = [f"{hour}:00" for hour in range(SLOT_START_HOUR, SLOT_END_HOUR)]


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"  # kept for stored data, never assigned by the service


class BookingCategory(str, Enum):
    UPCOMING = "upcoming"
    PAST = "past"
    CANCELLED = "cancelled"


def normalize_time_slot(value: str) -> Optional[str]:
    """Return the canonical slot label ("8:00", "14:00") or None if value is not a slot."""
    if not value:
        return None
    hour_str, sep, minute_str = value.strip().partition(":")
    if not sep or not hour_str.isdigit() or minute_str != "00":
        return None
    slot = f"{int(hour_str)}:00"
    return slot if slot in TIME_SLOTS else None


def time_slot_hour(slot: str) -> int:
    return int(slot.split(":")[0])


def time_slot_label(slot: str) -> str:
    """Display label, e.g. "14:00" -> "2:00 PM"."""
    hour = time_slot_hour(slot)
    formatted_hour = 12 if hour % 12 == 0 else hour % 12
    am_pm = "AM" if hour < 12 else "PM"
    return f"{formatted_hour}:00 {am_pm}"


class Booking(BaseModel):
    id: str
    user_id: str
    user_name: Optional[str] = None
    station_id: str
    station_name: str
    date: datetime
    time_slot: str
    status: BookingStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookingListResult(BaseModel):
    bookings: List[Booking] = []
    error: Optional[str] = None


class ReservationResult(BaseModel):
    booking: Booking
    bookings: BookingListResult


class CancellationResult(BaseModel):
    booking: Booking
    already_cancelled: bool = False
    bookings: BookingListResult
