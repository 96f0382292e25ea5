"""Weather condition families derived from provider icon codes."""

from dataclasses import dataclass
from enum import Enum

from models import Advice


class WeatherFamily(Enum):
    CLEAR = "01"
    FEW_CLOUDS = "02"
    SCATTERED_CLOUDS = "03"
    BROKEN_CLOUDS = "04"
    SHOWER_RAIN = "09"
    RAIN = "10"
    THUNDERSTORM = "11"
    SNOW = "13"
    MIST = "50"

    @property
    def is_precipitation(self) -> bool:
        return self in (
            WeatherFamily.SHOWER_RAIN,
            WeatherFamily.RAIN,
            WeatherFamily.THUNDERSTORM,
        )


@dataclass(frozen=True)
class IconCode:
    family: WeatherFamily
    is_day: bool

    @classmethod
    def parse(cls, code: str) -> "IconCode":
        """Parse codes like ``"01d"`` or ``"10n"``."""
        if len(code) != 3 or code[2] not in ("d", "n"):
            raise ValueError(f"Malformed icon code: {code!r}")
        try:
            family = WeatherFamily(code[:2])
        except ValueError:
            raise ValueError(f"Unknown weather family in icon code: {code!r}")
        return cls(family=family, is_day=code[2] == "d")

    @property
    def code(self) -> str:
        return f"{self.family.value}{'d' if self.is_day else 'n'}"


def smart_advice(temp_c: float, icon: str) -> Advice:
    """Clothing/activity hint for the current conditions."""
    family = IconCode.parse(icon).family

    if family.is_precipitation:
        return Advice(text="Don't forget an umbrella!", icon="umbrella")
    if family is WeatherFamily.SNOW:
        return Advice(text="Bundle up, it's snowing!", icon="snowflake")
    if temp_c > 30:
        return Advice(text="Stay hydrated & cool.", icon="flame")
    if temp_c < 10:
        return Advice(text="Wear a warm jacket.", icon="shirt")
    if 10 <= temp_c <= 20:
        return Advice(text="A light hoodie is perfect.", icon="shirt")
    return Advice(text="Perfect weather for a walk!", icon="sun")


def is_daytime(now_seconds: float, sunrise: int, sunset: int) -> bool:
    return sunrise < now_seconds < sunset
