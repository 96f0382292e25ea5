from datetime import timedelta, timezone

import pytest
from pydantic import ValidationError

from forecast_aggregator import (
    aggregate_daily,
    compass_direction,
    convert_temperature,
    dew_point_approx,
    local_time_of_day,
    resolve_day_timezone,
    truncate_hourly,
)
from models import WeatherSample
from tests.conftest import MAY_1_2024_UTC, THREE_HOURS, condition


def sample(dt, temp=10.0, temp_min=None, temp_max=None, icon="01d"):
    return WeatherSample(
        dt=dt,
        temp=temp,
        temp_min=temp_min,
        temp_max=temp_max,
        weather=[condition(icon=icon)],
    )


def two_day_feed():
    return [
        sample(
            MAY_1_2024_UTC + i * THREE_HOURS,
            temp=10 + i,
            temp_min=5 + i,
            temp_max=15 + i,
            icon="01d" if i < 8 else "10n",
        )
        for i in range(16)
    ]


class TestAggregateDaily:
    def test_empty_input(self):
        assert aggregate_daily([]) == []
        assert aggregate_daily([], timezone.utc) == []

    def test_two_days_from_midnight(self):
        daily = aggregate_daily(two_day_feed(), timezone.utc)

        assert len(daily) == 2
        first, second = daily
        assert first.dt == MAY_1_2024_UTC
        assert (first.temp.min, first.temp.max) == (5, 15)
        assert first.weather[0].icon == "01d"
        assert second.dt == MAY_1_2024_UTC + 8 * THREE_HOURS
        assert (second.temp.min, second.temp.max) == (13, 23)
        assert second.weather[0].icon == "10n"

    def test_later_samples_of_a_day_are_discarded(self):
        samples = [
            sample(MAY_1_2024_UTC, temp_min=1, temp_max=2, icon="01d"),
            sample(MAY_1_2024_UTC + THREE_HOURS, temp_min=-20, temp_max=40, icon="13d"),
        ]

        daily = aggregate_daily(samples, timezone.utc)

        assert len(daily) == 1
        assert daily[0].temp.min == 1
        assert daily[0].temp.max == 2
        assert daily[0].weather[0].icon == "01d"

    def test_length_matches_distinct_dates(self):
        # 40 samples at 3h from 06:00 touch six calendar dates
        samples = [sample(MAY_1_2024_UTC + 2 * THREE_HOURS + i * THREE_HOURS) for i in range(40)]

        daily = aggregate_daily(samples, timezone.utc)

        assert len(daily) == 6
        assert len(daily) <= len(samples)
        assert [d.dt for d in daily] == sorted(d.dt for d in daily)

    def test_dates_follow_the_given_timezone(self):
        samples = [
            sample(MAY_1_2024_UTC),
            sample(MAY_1_2024_UTC + THREE_HOURS),
            sample(MAY_1_2024_UTC + 2 * THREE_HOURS),
        ]
        new_york = timezone(timedelta(hours=-5))

        # 19:00 and 22:00 on April 30, then 01:00 on May 1
        daily = aggregate_daily(samples, new_york)

        assert [d.dt for d in daily] == [MAY_1_2024_UTC, MAY_1_2024_UTC + 2 * THREE_HOURS]

    def test_local_timezone_by_default(self):
        samples = two_day_feed()
        assert len(aggregate_daily(samples)) in (2, 3)


class TestWeatherSample:
    def test_negative_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            sample(-1)

    def test_missing_condition_rejected(self):
        with pytest.raises(ValidationError):
            WeatherSample(dt=0, temp=1.0, weather=None)
        with pytest.raises(ValidationError):
            WeatherSample(dt=0, temp=1.0, weather=[])

    def test_condition_is_first_weather_entry(self):
        s = WeatherSample(
            dt=0, temp=1.0, weather=[condition(icon="02n"), condition(icon="50d")]
        )
        assert s.condition.icon == "02n"


class TestTruncateHourly:
    def test_caps_to_limit(self):
        samples = list(range(40))
        assert truncate_hourly(samples, 8) == list(range(8))

    def test_limit_beyond_length(self):
        samples = list(range(40))
        assert truncate_hourly(samples, 100) == samples

    @pytest.mark.parametrize("limit", [0, -3])
    def test_non_positive_limit(self, limit):
        assert truncate_hourly(list(range(40)), limit) == []


class TestDerivedValues:
    def test_dew_point(self):
        assert dew_point_approx(25, 100) == 25
        assert dew_point_approx(25, 50) == 15

    def test_dew_point_extrapolates_out_of_range_humidity(self):
        assert dew_point_approx(20, 110) == 22
        assert dew_point_approx(20, -5) == -1

    @pytest.mark.parametrize(
        "bearing, expected",
        [
            (0, "N"),
            (45, "NE"),
            (90, "E"),
            (200, "S"),
            (315, "NW"),
            (360, "N"),
            (-45, "NW"),
            (-90, "W"),
            (22.5, "NE"),
            (337.5, "N"),
            (720, "N"),
        ],
    )
    def test_compass_direction(self, bearing, expected):
        assert compass_direction(bearing) == expected

    @pytest.mark.parametrize(
        "celsius, unit, expected",
        [
            (0, "F", 32),
            (100, "F", 212),
            (20, "C", 20),
            (-40, "F", -40),
            (2.5, "C", 3),
            (18.4, "f", 65),
        ],
    )
    def test_convert_temperature(self, celsius, unit, expected):
        assert convert_temperature(celsius, unit) == expected

    def test_convert_temperature_unknown_unit(self):
        with pytest.raises(ValueError):
            convert_temperature(10, "K")


class TestLocalTimeOfDay:
    AFTERNOON_MS = (MAY_1_2024_UTC + 15 * 3600 + 4 * 60 + 5) * 1000

    def test_utc(self):
        assert local_time_of_day(self.AFTERNOON_MS, 0) == "3:04:05 PM"

    def test_half_hour_offset(self):
        assert local_time_of_day(self.AFTERNOON_MS, 19800) == "8:34:05 PM"

    def test_negative_offset_crosses_midnight(self):
        assert local_time_of_day(MAY_1_2024_UTC * 1000, -3600) == "11:00:00 PM"

    def test_midnight_and_noon(self):
        assert local_time_of_day(MAY_1_2024_UTC * 1000, 0) == "12:00:00 AM"
        assert local_time_of_day(MAY_1_2024_UTC * 1000, 12 * 3600) == "12:00:00 PM"

    @pytest.mark.parametrize("offset", [None, "abc", float("nan")])
    def test_missing_offset_counts_as_zero(self, offset):
        assert local_time_of_day(self.AFTERNOON_MS, offset) == "3:04:05 PM"

    def test_unrepresentable_instant(self):
        assert local_time_of_day(self.AFTERNOON_MS, 1e20) == ""


def test_resolve_day_timezone():
    assert resolve_day_timezone("utc") is timezone.utc
    assert resolve_day_timezone("local") is None
    with pytest.raises(ValueError):
        resolve_day_timezone("Mars/Olympus")
