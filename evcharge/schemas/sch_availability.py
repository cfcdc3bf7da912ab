from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime

class AvailabilityCheck(BaseModel):
    station_id: str
    date: datetime
    time_slot: str
    available: bool
    error: Optional[str] = None

class SlotAvailability(BaseModel):
    time_slot: str
    label: str
    available: bool

class DayAvailability(BaseModel):
    station_id: str
    day: date
    slots: List[SlotAvailability]
    error: Optional[str] = None
