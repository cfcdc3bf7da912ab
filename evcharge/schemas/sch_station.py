from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from evcharge.models.mod_station import VehicleType

class StationCreate(BaseModel):
    name: str
    latitude: float
    longitude: float
    vehicle_types: List[VehicleType]
    price_per_hour: float = Field(description="Price per hour in local currency")
    available_slots: int = 1
    description: str = ""
    address: str = ""
    is_active: bool = True
    is_public: bool = True

class StationUpdate(BaseModel):
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    vehicle_types: Optional[List[VehicleType]] = None
    price_per_hour: Optional[float] = None
    available_slots: Optional[int] = None
    description: Optional[str] = None
    address: Optional[str] = None
    is_active: Optional[bool] = None
    is_public: Optional[bool] = None

class StationResponse(BaseModel):
    id: str
    name: str
    owner_id: str
    owner_name: Optional[str]
    latitude: float
    longitude: float
    vehicle_types: List[VehicleType]
    price_per_hour: float
    available_slots: int
    description: str
    address: str
    is_active: bool
    is_public: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
