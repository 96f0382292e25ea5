import logging
import math
from datetime import datetime, timedelta, timezone, tzinfo
from typing import List, Optional, Sequence, TypeVar

from models import DailyForecastEntry, TemperatureRange, WeatherSample

logger = logging.getLogger(__name__)

COMPASS_POINTS = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]

T = TypeVar("T")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calendar_date(timestamp: int, tz: Optional[tzinfo] = None) -> str:
    """Calendar date of a UTC timestamp, in ``tz`` or the process's local zone."""
    if tz is None:
        return datetime.fromtimestamp(timestamp).date().isoformat()
    return datetime.fromtimestamp(timestamp, tz).date().isoformat()


def aggregate_daily(
    samples: Sequence[WeatherSample], tz: Optional[tzinfo] = None
) -> List[DailyForecastEntry]:
    """
    Collapse a chronological sample feed into one entry per calendar date.

    Each entry is built from the first sample seen for its date; later samples
    of the same date are discarded, their min/max are not merged in.
    """
    daily: List[DailyForecastEntry] = []
    seen_dates = set()

    for sample in samples:
        date = calendar_date(sample.dt, tz)
        if date in seen_dates:
            continue
        seen_dates.add(date)
        daily.append(
            DailyForecastEntry(
                dt=sample.dt,
                temp=TemperatureRange(min=sample.temp_min, max=sample.temp_max),
                weather=list(sample.weather),
            )
        )

    logger.debug(f"Aggregated {len(samples)} samples into {len(daily)} days")
    return daily


def truncate_hourly(samples: Sequence[T], limit: int) -> List[T]:
    """Return the first ``limit`` samples unchanged."""
    if limit <= 0:
        return []
    return list(samples[:limit])


def dew_point_approx(temperature_c: float, relative_humidity_pct: float) -> float:
    # Linear approximation, humidity outside 0-100 is extrapolated
    return temperature_c - ((100 - relative_humidity_pct) / 5)


def local_time_of_day(utc_now_millis: int, utc_offset_seconds=None) -> str:
    """
    Wall-clock time at a remote location, e.g. ``"3:04:05 PM"``.

    The current instant is shifted by the location's UTC offset and rendered
    as UTC, so no timezone database is needed. A missing or non-numeric
    offset counts as zero; an unrepresentable instant gives ``""``.
    """
    try:
        offset = float(utc_offset_seconds or 0)
    except (TypeError, ValueError):
        offset = 0.0
    if math.isnan(offset) or math.isinf(offset):
        offset = 0.0

    try:
        shifted = datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(
            milliseconds=utc_now_millis + offset * 1000
        )
    except (OverflowError, ValueError) as e:
        logger.warning(f"Cannot render local time for offset {utc_offset_seconds}: {e}")
        return ""

    hour = shifted.hour % 12 or 12
    meridiem = "AM" if shifted.hour < 12 else "PM"
    return f"{hour}:{shifted.minute:02d}:{shifted.second:02d} {meridiem}"


def compass_direction(bearing_degrees: float) -> str:
    index = _round_half_up(bearing_degrees / 45)
    return COMPASS_POINTS[((index % 8) + 8) % 8]


def convert_temperature(celsius: float, target_unit: str) -> int:
    """Convert a Celsius reading to ``"C"`` or ``"F"``, rounded for display."""
    unit = target_unit.upper()
    if unit == "C":
        return _round_half_up(celsius)
    if unit == "F":
        return _round_half_up(celsius * 9 / 5 + 32)
    raise ValueError(f"Unsupported temperature unit: {target_unit}")


def resolve_day_timezone(name: str) -> Optional[tzinfo]:
    """Map the ``forecast.day_timezone`` setting to a tzinfo (None means local)."""
    if name.lower() == "utc":
        return timezone.utc
    if name.lower() == "local":
        return None
    raise ValueError(f"Unsupported day_timezone: {name}")
