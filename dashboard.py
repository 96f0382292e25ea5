import time
from typing import Optional

from conditions import IconCode, is_daytime, smart_advice
from forecast_aggregator import (
    compass_direction,
    convert_temperature,
    dew_point_approx,
    local_time_of_day,
    truncate_hourly,
)
from models import (
    CurrentWeather,
    DashboardDay,
    DashboardHour,
    DashboardView,
    ForecastResponse,
)


def _convert_optional(celsius: Optional[float], unit: str) -> Optional[int]:
    if celsius is None:
        return None
    return convert_temperature(celsius, unit)


def build_dashboard(
    current: CurrentWeather,
    forecast: ForecastResponse,
    unit: str = "C",
    hourly_limit: int = 8,
    now_millis: Optional[int] = None,
) -> DashboardView:
    """
    Combine current conditions and the forecast into the dashboard view.

    All temperatures are converted to ``unit`` and rounded for display; dew
    point, wind direction and the location's wall-clock time are derived here.
    """
    if now_millis is None:
        now_millis = int(time.time() * 1000)

    icon = IconCode.parse(current.icon)

    hourly = [
        DashboardHour(
            dt=h.dt,
            temp=convert_temperature(h.temp, unit),
            icon=h.weather[0].icon,
            main=h.weather[0].main,
        )
        for h in truncate_hourly(forecast.list, hourly_limit)
    ]
    daily = [
        DashboardDay(
            dt=d.dt,
            temp_min=_convert_optional(d.temp.min, unit),
            temp_max=_convert_optional(d.temp.max, unit),
            icon=d.weather[0].icon,
            description=d.weather[0].description,
        )
        for d in forecast.daily
    ]

    return DashboardView(
        location=current.name,
        country=current.country,
        unit=unit.upper(),
        temperature=convert_temperature(current.temp, unit),
        feels_like=convert_temperature(current.feels_like, unit),
        description=current.description,
        icon=current.icon,
        family=icon.family.name.lower(),
        is_day=is_daytime(now_millis / 1000, current.sunrise, current.sunset),
        humidity=current.humidity,
        dew_point=convert_temperature(
            dew_point_approx(current.temp, current.humidity), unit
        ),
        pressure=current.pressure,
        visibility_km=(
            current.visibility / 1000 if current.visibility is not None else None
        ),
        wind_speed=current.wind_speed,
        wind_direction=compass_direction(current.wind_deg),
        local_time=local_time_of_day(now_millis, current.timezone),
        sunrise=current.sunrise,
        sunset=current.sunset,
        advice=smart_advice(current.temp, current.icon),
        hourly=hourly,
        daily=daily,
    )
