import pytest
from unittest.mock import MagicMock, patch
from datetime import date, datetime, timedelta, timezone
from sqlalchemy.exc import OperationalError
import uuid

from evcharge.configuration.config import Config
from evcharge.configuration.clock import local_day
from evcharge.models.mod_booking import TIME_SLOTS
from evcharge.models.mod_tables import BookingRecord
from evcharge.services.svc_availability import AvailabilityService


class TestAvailabilityService:
    @pytest.fixture
    def add_booking(self, db):
        def _add_booking(station_id, date, time_slot, status="confirmed"):
            record = BookingRecord(
                id=str(uuid.uuid4()),
                user_id="user123",
                user_name="Asha Rao",
                station_id=station_id,
                station_name=f"Station {station_id}",
                date=date,
                slot_day=local_day(date),
                time_slot=time_slot,
                status=status
            )
            db.add(record)
            db.commit()
            return record
        return _add_booking

    @pytest.fixture
    def failing_db(self):
        mock_db = MagicMock()
        mock_db.execute.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
        return mock_db

    def test_free_slot_is_available(self, db, booking_day):
        result = AvailabilityService.check_slot_availability(db, "S1", booking_day, "10:00")

        assert result.available is True
        assert result.error is None
        assert result.station_id == "S1"
        assert result.time_slot == "10:00"

    def test_confirmed_booking_blocks_slot(self, db, add_booking, booking_day):
        add_booking("S1", booking_day, "10:00")

        assert AvailabilityService.is_slot_available(db, "S1", booking_day, "10:00") is False

    def test_time_of_day_is_ignored(self, db, add_booking, booking_day):
        add_booking("S1", booking_day, "10:00")

        for hour, minute in [(0, 0), (9, 45), (23, 59)]:
            query_date = booking_day.replace(hour=hour, minute=minute)
            assert AvailabilityService.is_slot_available(db, "S1", query_date, "10:00") is False

    def test_booking_at_end_of_day_is_counted(self, db, add_booking, booking_day):
        add_booking("S1", booking_day + timedelta(hours=23, minutes=59, seconds=59, milliseconds=999), "10:00")

        assert AvailabilityService.is_slot_available(db, "S1", booking_day, "10:00") is False
        assert AvailabilityService.is_slot_available(db, "S1", booking_day + timedelta(days=1), "10:00") is True

    def test_cancelled_booking_does_not_block(self, db, add_booking, booking_day):
        add_booking("S1", booking_day, "10:00", status="cancelled")

        assert AvailabilityService.is_slot_available(db, "S1", booking_day, "10:00") is True

    def test_other_station_day_and_slot_are_independent(self, db, add_booking, booking_day):
        add_booking("S1", booking_day, "10:00")

        assert AvailabilityService.is_slot_available(db, "S2", booking_day, "10:00") is True
        assert AvailabilityService.is_slot_available(db, "S1", booking_day - timedelta(days=1), "10:00") is True
        assert AvailabilityService.is_slot_available(db, "S1", booking_day, "11:00") is True

    def test_check_failure_reports_unavailable(self, failing_db, booking_day):
        result = AvailabilityService.check_slot_availability(failing_db, "S1", booking_day, "10:00")

        assert result.available is False
        assert result.error == AvailabilityService.CHECK_FAILED_MESSAGE
        assert AvailabilityService.is_slot_available(failing_db, "S1", booking_day, "10:00") is False

    def test_day_availability_lists_every_slot(self, db, add_booking, booking_day):
        add_booking("S1", booking_day, "8:00")
        add_booking("S1", booking_day, "14:00")
        add_booking("S1", booking_day, "15:00", status="cancelled")

        result = AvailabilityService.get_station_day_availability(db, "S1", booking_day.replace(hour=17))

        assert result.day == date(2025, 6, 10)
        assert [slot.time_slot for slot in result.slots] == TIME_SLOTS
        taken = [slot.time_slot for slot in result.slots if not slot.available]
        assert taken == ["8:00", "14:00"]
        assert result.slots[0].label == "8:00 AM"
        assert result.slots[-1].label == "7:00 PM"
        assert result.error is None

    def test_day_availability_failure_marks_all_slots_taken(self, failing_db, booking_day):
        result = AvailabilityService.get_station_day_availability(failing_db, "S1", booking_day)

        assert len(result.slots) == 12
        assert all(not slot.available for slot in result.slots)
        assert result.error == AvailabilityService.CHECK_FAILED_MESSAGE

    def test_days_follow_local_timezone(self, db, add_booking):
        with patch.object(Config, "LOCAL_TIMEZONE", "Asia/Kolkata"):
            # Local midnight of 2025-06-10 in India
            add_booking("S1", datetime(2025, 6, 9, 18, 30, tzinfo=timezone.utc), "10:00")

            assert AvailabilityService.is_slot_available(
                db, "S1", datetime(2025, 6, 10, 0, 0, tzinfo=timezone.utc), "10:00"
            ) is False
            assert AvailabilityService.is_slot_available(
                db, "S1", datetime(2025, 6, 9, 12, 0, tzinfo=timezone.utc), "10:00"
            ) is True
            # Naive values are local wall-clock time
            assert AvailabilityService.is_slot_available(
                db, "S1", datetime(2025, 6, 10, 23, 0), "10:00"
            ) is False
