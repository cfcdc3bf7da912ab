from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from evcharge.models.mod_booking import BookingCategory, BookingStatus

class BookingCreate(BaseModel):
    station_id: str
    station_name: str
    date: datetime = Field(
        description="Booking day in ISO 8601 format (e.g. 2025-06-10T00:00:00+05:30); the time of day is ignored"
    )
    time_slot: str = Field(
        description="One-hour slot label, 8:00 through 19:00 (e.g. 14:00)"
    )

class BookingResponse(BaseModel):
    id: str
    user_id: str
    user_name: Optional[str]
    station_id: str
    station_name: str
    date: datetime
    time_slot: str
    time_slot_label: str
    status: BookingStatus
    category: BookingCategory
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class BookingListResponse(BaseModel):
    bookings: List[BookingResponse]
    upcoming: List[BookingResponse]
    past: List[BookingResponse]
    cancelled: List[BookingResponse]
    error: Optional[str] = None

class BookingMutationResponse(BaseModel):
    """A created or cancelled booking together with the reloaded booking list"""
    booking: BookingResponse
    bookings: BookingListResponse
    message: str
