import logging
import os
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from config_loader import load_config
from dashboard import build_dashboard
from forecast_aggregator import resolve_day_timezone
from models import (
    CurrentWeather,
    DashboardView,
    ErrorResponse,
    ForecastResponse,
    LocationSuggestion,
)
from recent_searches import RecentSearchStore
from weather_service import (
    ConfigurationError,
    MissingLocationError,
    ProviderError,
    WeatherService,
)

# Configure logging with Docker-friendly format
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(),  # Console output for Docker logs
        (
            logging.FileHandler("/app/logs/weather_dashboard.log")
            if os.path.exists("/app/logs")
            else logging.NullHandler()
        ),
    ],
)
logger = logging.getLogger(__name__)

# Global variables
config = load_config()
weather_service = WeatherService(config.provider)
recent_searches = RecentSearchStore(
    config.recent_searches.path, config.recent_searches.max_entries
)
day_timezone = resolve_day_timezone(config.forecast.day_timezone)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info("Starting weather dashboard API")
    logger.info(f"Provider: {config.provider.base_url}")
    logger.info(f"Daily forecasts bucketed in {config.forecast.day_timezone} time")
    if not config.provider.api_key:
        logger.warning("No provider API key configured, weather lookups will fail")

    # Create directory for the recent searches file if it doesn't exist
    cache_dir = os.path.dirname(config.recent_searches.path)
    if cache_dir and not os.path.exists(cache_dir):
        os.makedirs(cache_dir, exist_ok=True)
        logger.info(f"Created cache directory: {cache_dir}")

    yield

    logger.info("Shutting down weather dashboard API")


# Create FastAPI app
app = FastAPI(
    title="Weather Dashboard API",
    description="Current weather, forecasts and place suggestions proxied from OpenWeatherMap",
    version="1.0.0",
    lifespan=lifespan,
)


def _lookup_error(exc: Exception, not_found: str, failure: str) -> JSONResponse:
    """Translate a failed provider lookup into the API's error payload."""
    if isinstance(exc, MissingLocationError):
        return JSONResponse(
            status_code=400, content={"error": "Missing location parameters"}
        )
    if isinstance(exc, ProviderError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": not_found, "details": exc.details},
        )
    logger.error(f"{failure}: {exc}")
    return JSONResponse(status_code=500, content={"error": failure, "details": str(exc)})


@app.get("/api/weather/current", response_model=CurrentWeather, responses=ERROR_RESPONSES)
async def get_current(
    q: Optional[str] = None, lat: Optional[str] = None, lon: Optional[str] = None
):
    """Current conditions for a place name or a lat/lon pair."""
    try:
        return await weather_service.get_current(q=q, lat=lat, lon=lon)
    except Exception as e:
        return _lookup_error(e, "Weather data not found", "Failed to fetch weather data")


@app.get("/api/weather/forecast", response_model=ForecastResponse, responses=ERROR_RESPONSES)
async def get_forecast(
    q: Optional[str] = None, lat: Optional[str] = None, lon: Optional[str] = None
):
    """
    5 day / 3 hour forecast.

    Returns every sample under ``list`` and one entry per calendar date under
    ``daily``.
    """
    try:
        return await weather_service.get_forecast(
            q=q, lat=lat, lon=lon, tz=day_timezone
        )
    except Exception as e:
        return _lookup_error(
            e, "Forecast data not found", "Failed to fetch forecast data"
        )


@app.get("/api/weather/suggestions", response_model=List[LocationSuggestion])
async def get_suggestions(q: Optional[str] = None):
    """Place-name suggestions for a partial query of at least two characters."""
    try:
        return await weather_service.get_suggestions(q)
    except ConfigurationError:
        return JSONResponse(status_code=500, content={"error": "API key not configured"})
    except ProviderError as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"error": "Failed to fetch location suggestions"},
        )
    except Exception as e:
        logger.error(f"Location suggestions API error: {e}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/api/weather/dashboard", response_model=DashboardView, responses=ERROR_RESPONSES)
async def get_dashboard(
    q: Optional[str] = None,
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    unit: str = "C",
):
    """Current conditions, near-term hours and daily forecast in one payload."""
    if unit.upper() not in ("C", "F"):
        return JSONResponse(
            status_code=400, content={"error": f"Unsupported unit: {unit}"}
        )

    try:
        current = await weather_service.get_current(q=q, lat=lat, lon=lon)
        forecast = await weather_service.get_forecast(
            q=q, lat=lat, lon=lon, tz=day_timezone
        )
        view = build_dashboard(
            current, forecast, unit=unit, hourly_limit=config.forecast.hourly_limit
        )
    except Exception as e:
        return _lookup_error(e, "Weather data not found", "Failed to fetch weather data")

    recent_searches.record(current.name)
    return view


@app.get("/api/recent-searches")
async def get_recent_searches():
    """Most recent successfully resolved place names, newest first."""
    return {"recent_searches": recent_searches.load()}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "provider": config.provider.base_url,
        "api_key_configured": bool(weather_service.provider.api_key),
        "day_timezone": config.forecast.day_timezone,
    }


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle general exceptions."""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500, content={"error": "Internal server error", "message": str(exc)}
    )


if __name__ == "__main__":
    import uvicorn

    # Get configuration from environment or config
    host = os.getenv("HOST", config.server.host)
    port = int(os.getenv("PORT", config.server.port))

    logger.info(f"Starting server on {host}:{port}")

    uvicorn.run(app, host=host, port=port, log_level=log_level.lower(), access_log=True)
