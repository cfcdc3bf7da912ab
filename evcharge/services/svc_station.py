from typing import List, Optional
import uuid
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from evcharge.configuration.clock import now_utc
from evcharge.configuration.monitor import log_event, log_exception, start_span
from evcharge.models.mod_auth import Caller, UserRole
from evcharge.models.mod_station import Station
from evcharge.models.mod_tables import StationRecord
from evcharge.schemas.sch_station import StationCreate, StationUpdate
from evcharge.services.svc_errors import (
    AuthenticationRequired,
    PermissionDenied,
    StationNotFound,
    StoreUnavailable,
)
from evcharge.validators.val_station import StationValidator

class StationService:
    @staticmethod
    def list_stations(db: Session, caller: Optional[Caller] = None) -> List[Station]:
        """Active stations, newest first. Owners see all of their own stations instead."""
        try:
            with start_span("list_stations"):
                query = select(StationRecord).order_by(StationRecord.created_at.desc())
                if caller is not None and caller.role == UserRole.OWNER:
                    query = query.where(StationRecord.owner_id == caller.id)
                else:
                    query = query.where(StationRecord.is_active.is_(True))

                stations = [Station.model_validate(record) for record in db.execute(query).scalars()]

                log_event("Stations retrieved", {"count": len(stations)})
                return stations
        except SQLAlchemyError as e:
            log_exception(e, {"operation": "list_stations"})
            raise StoreUnavailable("Failed to fetch charging stations. Please try again.") from e

    @staticmethod
    def _get_record(db: Session, station_id: str) -> StationRecord:
        record = db.get(StationRecord, station_id)
        if record is None:
            log_event("Station not found", {"station_id": station_id})
            raise StationNotFound()
        return record

    @staticmethod
    def get_station(db: Session, station_id: str) -> Station:
        try:
            with start_span("get_station", attributes={"station_id": station_id}):
                return Station.model_validate(StationService._get_record(db, station_id))
        except SQLAlchemyError as e:
            log_exception(e, {"operation": "get_station", "station_id": station_id})
            raise StoreUnavailable("Failed to load charging station. Please try again.") from e

    @staticmethod
    def _require_owner(caller: Optional[Caller], action: str) -> Caller:
        if caller is None:
            raise AuthenticationRequired(f"You must be logged in to {action} a station")
        if caller.role != UserRole.OWNER:
            raise PermissionDenied(f"Only station owners can {action} a station")
        return caller

    @staticmethod
    def _require_station_owner(caller: Caller, record: StationRecord, action: str):
        if record.owner_id != caller.id:
            raise PermissionDenied(f"You can only {action} your own stations")

    @staticmethod
    def create_station(db: Session, caller: Optional[Caller], station: StationCreate) -> Station:
        caller = StationService._require_owner(caller, "add")
        try:
            with start_span("create_station", attributes={"owner_id": caller.id}):
                log_event("Create station started", {"owner_id": caller.id, "name": station.name})

                StationValidator.validate_create_station(station)

                data = station.model_dump()
                data["vehicle_types"] = [vehicle_type.value for vehicle_type in station.vehicle_types]
                record = StationRecord(
                    id=str(uuid.uuid4()),
                    owner_id=caller.id,
                    owner_name=caller.name,
                    **data
                )
                db.add(record)
                db.commit()
                db.refresh(record)

                log_event("Station created successfully", {"station_id": record.id, "owner_id": caller.id})
                return Station.model_validate(record)
        except SQLAlchemyError as e:
            db.rollback()
            log_exception(e, {"operation": "create_station", "owner_id": caller.id})
            raise StoreUnavailable("Failed to add charging station. Please try again.") from e
        except Exception as e:
            log_exception(e, {"operation": "create_station", "owner_id": caller.id})
            raise

    @staticmethod
    def update_station(db: Session, caller: Optional[Caller], station_id: str, station: StationUpdate) -> Station:
        caller = StationService._require_owner(caller, "update")
        try:
            with start_span("update_station", attributes={"station_id": station_id}):
                log_event("Update station started", {"station_id": station_id, "owner_id": caller.id})

                record = StationService._get_record(db, station_id)
                StationService._require_station_owner(caller, record, "update")
                StationValidator.validate_update_station(station)

                changes = station.model_dump(exclude_unset=True)
                if changes.get("vehicle_types") is not None:
                    changes["vehicle_types"] = [vehicle_type.value for vehicle_type in station.vehicle_types]
                if changes:
                    for field, value in changes.items():
                        setattr(record, field, value)
                    record.updated_at = now_utc()
                    db.commit()
                    log_event("Station updated successfully", {
                        "station_id": station_id,
                        "fields": ",".join(sorted(changes))
                    })
                else:
                    log_event("No changes detected for station update", {"station_id": station_id})

                return Station.model_validate(record)
        except SQLAlchemyError as e:
            db.rollback()
            log_exception(e, {"operation": "update_station", "station_id": station_id})
            raise StoreUnavailable("Failed to update charging station. Please try again.") from e
        except Exception as e:
            log_exception(e, {"operation": "update_station", "station_id": station_id})
            raise

    @staticmethod
    def delete_station(db: Session, caller: Optional[Caller], station_id: str) -> None:
        """Delete a station. Bookings made against it are kept."""
        caller = StationService._require_owner(caller, "delete")
        try:
            with start_span("delete_station", attributes={"station_id": station_id}):
                record = StationService._get_record(db, station_id)
                StationService._require_station_owner(caller, record, "delete")

                db.delete(record)
                db.commit()

                log_event("Station deleted successfully", {"station_id": station_id, "owner_id": caller.id})
        except SQLAlchemyError as e:
            db.rollback()
            log_exception(e, {"operation": "delete_station", "station_id": station_id})
            raise StoreUnavailable("Failed to delete charging station. Please try again.") from e
        except Exception as e:
            log_exception(e, {"operation": "delete_station", "station_id": station_id})
            raise
