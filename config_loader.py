import os

import toml
from models import (
    Config,
    ForecastConfig,
    ProviderConfig,
    RecentSearchesConfig,
    ServerConfig,
)

API_KEY_ENV_VARS = ("API_KEY", "OPENWEATHER_API_KEY")


def load_config(config_path: str = None) -> Config:
    """Load configuration from TOML file."""
    if config_path is None:
        config_path = os.getenv("CONFIG_PATH", "config.toml")

    try:
        with open(config_path, "r") as f:
            config_data = toml.load(f)

        server_config = ServerConfig(**config_data.get("server", {}))
        provider_config = ProviderConfig(**config_data.get("provider", {}))
        forecast_config = ForecastConfig(**config_data.get("forecast", {}))
        recent_config = RecentSearchesConfig(**config_data.get("recent_searches", {}))

    except Exception as e:
        raise Exception(f"Failed to load config: {e}")

    # The API key is kept out of the config file where possible
    for env_var in API_KEY_ENV_VARS:
        api_key = os.getenv(env_var)
        if api_key:
            provider_config.api_key = api_key
            break

    return Config(
        server=server_config,
        provider=provider_config,
        forecast=forecast_config,
        recent_searches=recent_config,
    )
