from pydantic import BaseModel, Field
from typing import Any, List, Optional


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class ProviderConfig(BaseModel):
    base_url: str = "https://api.openweathermap.org/data/2.5"
    geo_url: str = "https://api.openweathermap.org/geo/1.0"
    api_key: str = ""
    units: str = "metric"
    timeout_seconds: float = 10.0
    suggestion_limit: int = 5
    min_query_length: int = 2


class ForecastConfig(BaseModel):
    hourly_limit: int = 8
    day_timezone: str = "local"  # "local" or "utc"


class RecentSearchesConfig(BaseModel):
    path: str = ".cache/recent_searches.json"
    max_entries: int = 5


class Config(BaseModel):
    server: ServerConfig = ServerConfig()
    provider: ProviderConfig = ProviderConfig()
    forecast: ForecastConfig = ForecastConfig()
    recent_searches: RecentSearchesConfig = RecentSearchesConfig()


class WeatherCondition(BaseModel):
    id: Optional[int] = None
    main: str
    description: str
    icon: str


class WeatherSample(BaseModel):
    dt: int = Field(ge=0)  # UTC seconds
    temp: float  # Celsius
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None
    weather: List[WeatherCondition] = Field(min_length=1)

    @property
    def condition(self) -> WeatherCondition:
        return self.weather[0]


class TemperatureRange(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class DailyForecastEntry(BaseModel):
    dt: int
    temp: TemperatureRange
    weather: List[WeatherCondition]


class HourlyEntry(BaseModel):
    dt: int
    temp: float
    weather: List[WeatherCondition]


class ForecastResponse(BaseModel):
    list: List[HourlyEntry]
    daily: List[DailyForecastEntry]


class CurrentWeather(BaseModel):
    name: str
    country: Optional[str] = None
    temp: float
    feels_like: float
    description: str
    icon: str
    humidity: float
    pressure: float
    visibility: Optional[float] = None  # metres
    wind_speed: float
    wind_deg: float = 0
    sunrise: int
    sunset: int
    dt: Optional[int] = None
    timezone: int = 0  # UTC offset in seconds


class LocationSuggestion(BaseModel):
    name: str
    country: str
    state: Optional[str] = None
    lat: float
    lon: float
    display_name: str


class Advice(BaseModel):
    text: str
    icon: str


class DashboardHour(BaseModel):
    dt: int
    temp: int
    icon: str
    main: str


class DashboardDay(BaseModel):
    dt: int
    temp_min: Optional[int] = None
    temp_max: Optional[int] = None
    icon: str
    description: str


class DashboardView(BaseModel):
    location: str
    country: Optional[str] = None
    unit: str
    temperature: int
    feels_like: int
    description: str
    icon: str
    family: str
    is_day: bool
    humidity: float
    dew_point: int
    pressure: float
    visibility_km: Optional[float] = None
    wind_speed: float
    wind_direction: str
    local_time: str
    sunrise: int
    sunset: int
    advice: Advice
    hourly: List[DashboardHour]
    daily: List[DashboardDay]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None
