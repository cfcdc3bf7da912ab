from datetime import datetime, timedelta, timezone
from evcharge.configuration.clock import local_datetime_at, local_day
from evcharge.configuration.monitor import log_event, start_span
from evcharge.models.mod_booking import Booking

ICS_DOMAIN = "evchargefinder.app"
DEFAULT_SLOT_HOUR = 12


class CalendarService:
    @staticmethod
    def slot_start_hour(time_slot: str) -> int:
        """
        Hour of day for "14:00", "2PM" or "11AM" labels; noon when unreadable.

        "12AM" is midnight and "12PM" noon. Only legacy labels use this form.
        """
        label = time_slot.strip().upper()
        try:
            if ":" in label:
                return int(label.split(":")[0])
            if label.endswith("AM"):
                return int(label[:-2]) % 12
            if label.endswith("PM"):
                return int(label[:-2]) % 12 + 12
        except ValueError:
            pass
        return DEFAULT_SLOT_HOUR

    @staticmethod
    def _format(value: datetime) -> str:
        return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    @staticmethod
    def build_booking_ics(booking: Booking, now: datetime) -> str:
        """iCalendar invite for a one-hour charging slot"""
        with start_span("build_booking_ics", attributes={"booking_id": booking.id}):
            start = local_datetime_at(local_day(booking.date), CalendarService.slot_start_hour(booking.time_slot))
            end = start + timedelta(hours=1)

            lines = [
                "BEGIN:VCALENDAR",
                "VERSION:2.0",
                "PRODID:-//EVChargeFinder//EN",
                "CALSCALE:GREGORIAN",
                "BEGIN:VEVENT",
                f"UID:{booking.id}@{ICS_DOMAIN}",
                f"SUMMARY:EV Charging Slot at {booking.station_name}",
                f"DESCRIPTION:Your charging slot at {booking.station_name}. Booking ID: {booking.id}",
                f"LOCATION:{booking.station_name}",
                f"DTSTART:{CalendarService._format(start)}",
                f"DTEND:{CalendarService._format(end)}",
                "STATUS:CONFIRMED",
                f"DTSTAMP:{CalendarService._format(now)}",
                "END:VEVENT",
                "END:VCALENDAR",
            ]
            log_event("Calendar invite generated", {"booking_id": booking.id})
            return "\r\n".join(lines)

    @staticmethod
    def filename(booking: Booking) -> str:
        return f"charging-slot-{booking.id}.ics"
