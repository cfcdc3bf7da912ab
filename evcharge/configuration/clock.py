from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo
from evcharge.configuration.config import Config


def get_local_timezone() -> tzinfo:
    """Timezone used to turn booking timestamps into calendar days"""
    if Config.LOCAL_TIMEZONE.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(Config.LOCAL_TIMEZONE)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive values are taken as local wall-clock time."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=get_local_timezone())
    return value.astimezone(timezone.utc)


def local_day(value: datetime) -> date:
    return as_utc(value).astimezone(get_local_timezone()).date()


def local_day_bounds(value: datetime) -> tuple[datetime, datetime]:
    """
    Inclusive [00:00:00.000, 23:59:59.999] range of the local calendar day
    containing value, returned in UTC.
    """
    local_tz = get_local_timezone()
    day = local_day(value)
    start = datetime.combine(day, time.min, tzinfo=local_tz)
    end = datetime.combine(day, time.max, tzinfo=local_tz)
    # Millisecond resolution, matching stored timestamps
    end = end.replace(microsecond=999000)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def local_datetime_at(day: date, hour: int) -> datetime:
    """Start of the given hour on a local calendar day, in UTC"""
    local_tz = get_local_timezone()
    start = datetime.combine(day, time.min, tzinfo=local_tz) + timedelta(hours=hour)
    return start.astimezone(timezone.utc)
