from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from enum import Enum

class VehicleType(str, Enum):
    TWO_WHEELER = "2W"
    FOUR_WHEELER = "4W"

class Station(BaseModel):
    id: str
    name: str
    owner_id: str
    owner_name: Optional[str] = None
    latitude: float
    longitude: float
    vehicle_types: List[VehicleType]
    price_per_hour: float
    available_slots: int
    description: str = ""
    address: str = ""
    is_active: bool = True
    is_public: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
