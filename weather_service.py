import logging
from datetime import tzinfo
from typing import Any, Dict, List, Optional

import httpx

from forecast_aggregator import aggregate_daily
from models import (
    CurrentWeather,
    ForecastResponse,
    HourlyEntry,
    LocationSuggestion,
    ProviderConfig,
    WeatherSample,
)

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Non-success response from the weather provider."""

    def __init__(self, status_code: int, details: Any = None):
        super().__init__(f"Provider responded with status {status_code}")
        self.status_code = status_code
        self.details = details


class MissingLocationError(ValueError):
    """Neither a place name nor a full lat/lon pair was given."""


class ConfigurationError(Exception):
    pass


def location_params(
    q: Optional[str] = None, lat: Optional[str] = None, lon: Optional[str] = None
) -> Dict[str, str]:
    """Pick the provider query for a place name or a coordinate pair."""
    if q:
        return {"q": q}
    if lat and lon:
        return {"lat": str(lat), "lon": str(lon)}
    raise MissingLocationError("Missing location parameters")


def format_display_name(name: str, country: str, state: Optional[str] = None) -> str:
    if state:
        return f"{name}, {state}, {country}"
    return f"{name}, {country}"


class WeatherService:
    def __init__(
        self,
        provider: ProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.provider = provider
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self.transport, timeout=self.provider.timeout_seconds
        )

    async def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        """GET a provider endpoint, raising ProviderError on non-2xx."""
        if not self.provider.api_key:
            raise ConfigurationError("API key not configured")

        logger.info(f"Fetching {url} with {params}")
        async with self._client() as client:
            response = await client.get(
                url, params={**params, "appid": self.provider.api_key}
            )

        if not response.is_success:
            try:
                details = response.json()
            except ValueError:
                details = response.text
            logger.error(
                f"Provider error response from {url}: {response.status_code} {details}"
            )
            raise ProviderError(response.status_code, details)

        return response.json()

    async def get_current(
        self, q: Optional[str] = None, lat: Optional[str] = None, lon: Optional[str] = None
    ) -> CurrentWeather:
        """Fetch current conditions and flatten the provider payload."""
        params = location_params(q, lat, lon)
        data = await self._get_json(
            f"{self.provider.base_url}/weather",
            {**params, "units": self.provider.units},
        )
        logger.info("Weather data received successfully")
        return self._reshape_current(data)

    async def get_forecast(
        self,
        q: Optional[str] = None,
        lat: Optional[str] = None,
        lon: Optional[str] = None,
        tz: Optional[tzinfo] = None,
    ) -> ForecastResponse:
        """
        Fetch the 5 day / 3 hour forecast.

        ``list`` carries every sample, ``daily`` one entry per calendar date
        bucketed in ``tz`` (the process's local zone when None).
        """
        params = location_params(q, lat, lon)
        data = await self._get_json(
            f"{self.provider.base_url}/forecast",
            {**params, "units": self.provider.units},
        )
        logger.info("Forecast data received successfully")

        samples = self._parse_samples(data)
        return ForecastResponse(
            list=[
                HourlyEntry(dt=s.dt, temp=s.temp, weather=s.weather) for s in samples
            ],
            daily=aggregate_daily(samples, tz),
        )

    async def get_suggestions(self, q: Optional[str]) -> List[LocationSuggestion]:
        """Geocode a partial place name into at most ``suggestion_limit`` matches."""
        if not q or len(q) < self.provider.min_query_length:
            return []

        data = await self._get_json(
            f"{self.provider.geo_url}/direct",
            {"q": q, "limit": self.provider.suggestion_limit},
        )

        return [
            LocationSuggestion(
                name=location["name"],
                country=location["country"],
                state=location.get("state"),
                lat=location["lat"],
                lon=location["lon"],
                display_name=format_display_name(
                    location["name"], location["country"], location.get("state")
                ),
            )
            for location in data[: self.provider.suggestion_limit]
        ]

    def _reshape_current(self, data: Dict[str, Any]) -> CurrentWeather:
        main = data["main"]
        wind = data.get("wind", {})
        sys_data = data.get("sys", {})
        condition = data["weather"][0]

        return CurrentWeather(
            name=data["name"],
            country=sys_data.get("country"),
            temp=main["temp"],
            feels_like=main["feels_like"],
            description=condition["description"],
            icon=condition["icon"],
            humidity=main["humidity"],
            pressure=main["pressure"],
            visibility=data.get("visibility"),
            wind_speed=wind.get("speed", 0),
            wind_deg=wind.get("deg", 0),
            sunrise=sys_data["sunrise"],
            sunset=sys_data["sunset"],
            dt=data.get("dt"),
            timezone=data.get("timezone") or 0,
        )

    def _parse_samples(self, data: Dict[str, Any]) -> List[WeatherSample]:
        # Samples missing their weather array fail validation here
        return [
            WeatherSample(
                dt=item["dt"],
                temp=item["main"]["temp"],
                temp_min=item["main"].get("temp_min"),
                temp_max=item["main"].get("temp_max"),
                weather=item.get("weather"),
            )
            for item in data.get("list", [])
        ]
