import os

import httpx
import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# main loads its config at import time
os.environ.setdefault("CONFIG_PATH", os.path.join(ROOT, "config.toml"))

MAY_1_2024_UTC = 1714521600
THREE_HOURS = 3 * 60 * 60


def condition(icon="01d", main="Clear", description="clear sky"):
    return {"id": 800, "main": main, "description": description, "icon": icon}


def forecast_item(dt, temp, temp_min, temp_max, icon="01d"):
    return {
        "dt": dt,
        "main": {"temp": temp, "temp_min": temp_min, "temp_max": temp_max},
        "weather": [condition(icon=icon)],
    }


@pytest.fixture
def current_payload():
    return {
        "name": "London",
        "dt": 1714561200,
        "timezone": 3600,
        "visibility": 10000,
        "main": {"temp": 18.4, "feels_like": 17.9, "humidity": 60, "pressure": 1012},
        "weather": [condition(icon="10d", main="Rain", description="light rain")],
        "wind": {"speed": 4.1, "deg": 200},
        "sys": {"country": "GB", "sunrise": 1714537000, "sunset": 1714591000},
    }


@pytest.fixture
def forecast_payload():
    """Two calendar days (UTC) of 3-hourly samples starting at midnight."""
    items = [
        forecast_item(
            MAY_1_2024_UTC + i * THREE_HOURS,
            temp=10 + i,
            temp_min=5 + i,
            temp_max=15 + i,
            icon="01d" if i < 8 else "10d",
        )
        for i in range(16)
    ]
    return {"cod": "200", "cnt": len(items), "list": items}


@pytest.fixture
def geocoding_payload():
    return [
        {"name": "Paris", "country": "FR", "lat": 48.8589, "lon": 2.32},
        {"name": "Paris", "country": "US", "state": "Texas", "lat": 33.66, "lon": -95.55},
    ]


class ProviderStub:
    """Records requests and answers them by URL path.

    ``routes`` maps a path suffix to a ``(status_code, json_body)`` pair.
    """

    def __init__(self, routes=None, error=None):
        self.routes = routes or {}
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        for suffix, (status_code, body) in self.routes.items():
            if request.url.path.endswith(suffix):
                return httpx.Response(status_code, json=body)
        return httpx.Response(404, json={"cod": "404", "message": "not found"})

    @property
    def transport(self):
        return httpx.MockTransport(self)
