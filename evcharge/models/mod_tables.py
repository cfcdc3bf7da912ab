from datetime import timezone
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    TypeDecorator,
    func,
    text,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """Stores naive UTC and hands back timezone-aware UTC datetimes"""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


CONFIRMED_ONLY = text("status = 'confirmed'")


class BookingRecord(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(128), nullable=False, index=True)
    user_name = Column(String(255), nullable=True)
    station_id = Column(String(36), nullable=False, index=True)
    station_name = Column(String(255), nullable=False)
    date = Column(UTCDateTime, nullable=False)
    # Local calendar day of `date`, the unit slots are unique within
    slot_day = Column(Date, nullable=False)
    time_slot = Column(String(8), nullable=False)
    status = Column(String(20), nullable=False, default="confirmed")
    created_at = Column(UTCDateTime, nullable=False, server_default=func.now())
    updated_at = Column(UTCDateTime, nullable=True)

    __table_args__ = (
        # At most one confirmed booking per station, day and slot
        Index(
            "uq_bookings_confirmed_slot",
            "station_id",
            "slot_day",
            "time_slot",
            unique=True,
            sqlite_where=CONFIRMED_ONLY,
            postgresql_where=CONFIRMED_ONLY,
        ),
        Index("ix_bookings_station_date", "station_id", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"<BookingRecord(id={self.id}, station={self.station_id}, "
            f"day={self.slot_day}, slot={self.time_slot}, status={self.status})>"
        )


class StationRecord(Base):
    __tablename__ = "stations"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    owner_id = Column(String(128), nullable=False, index=True)
    owner_name = Column(String(255), nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    vehicle_types = Column(JSON, nullable=False, default=list)
    price_per_hour = Column(Float, nullable=False)
    available_slots = Column(Integer, nullable=False, default=1)
    description = Column(Text, nullable=False, default="")
    address = Column(String(512), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, nullable=False, server_default=func.now())
    updated_at = Column(UTCDateTime, nullable=True)


class UserProfileRecord(Base):
    __tablename__ = "users"

    id = Column(String(128), primary_key=True)
    name = Column(String(255), nullable=True)
    email = Column(String(320), nullable=True)
    role = Column(String(20), nullable=False, default="user")
    created_at = Column(UTCDateTime, nullable=False, server_default=func.now())
