from typing import List, Optional
from evcharge.schemas.sch_station import StationCreate, StationUpdate
from evcharge.services.svc_errors import ValidationError

class StationValidationError(ValidationError):
    pass

class StationValidator:
    @staticmethod
    def validate_name(name: Optional[str]):
        if name is not None and not name.strip():
            raise StationValidationError("Station name is required")

    @staticmethod
    def validate_price(price_per_hour: Optional[float]):
        if price_per_hour is not None and price_per_hour <= 0:
            raise StationValidationError("Price must be a positive number")

    @staticmethod
    def validate_available_slots(available_slots: Optional[int]):
        if available_slots is not None and available_slots < 1:
            raise StationValidationError("A station needs at least one charging slot")

    @staticmethod
    def validate_vehicle_types(vehicle_types: Optional[List]):
        if vehicle_types is not None and len(vehicle_types) == 0:
            raise StationValidationError("Select at least one vehicle type")

    @staticmethod
    def validate_coordinates(latitude: Optional[float], longitude: Optional[float]):
        if latitude is not None and not (-90 <= latitude <= 90):
            raise StationValidationError("Latitude must be between -90 and 90")
        if longitude is not None and not (-180 <= longitude <= 180):
            raise StationValidationError("Longitude must be between -180 and 180")

    @staticmethod
    def validate_create_station(station: StationCreate):
        """Validate all rules for creating a station"""
        StationValidator.validate_name(station.name)
        StationValidator.validate_price(station.price_per_hour)
        StationValidator.validate_available_slots(station.available_slots)
        StationValidator.validate_vehicle_types(station.vehicle_types)
        StationValidator.validate_coordinates(station.latitude, station.longitude)

    @staticmethod
    def validate_update_station(station: StationUpdate):
        """Validate the fields present in a partial update"""
        StationValidator.validate_name(station.name)
        StationValidator.validate_price(station.price_per_hour)
        StationValidator.validate_available_slots(station.available_slots)
        StationValidator.validate_vehicle_types(station.vehicle_types)
        StationValidator.validate_coordinates(station.latitude, station.longitude)
