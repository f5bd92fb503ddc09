"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
import yaml

from weatherapp.config.schema import ProviderConfig

TEST_BASE_URL = "https://test-owm.example.com/data/2.5"
TEST_GEO_URL = "https://test-owm.example.com/geo/1.0"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


def _load(name: str) -> object:
    with open(Path(__file__).parent / "fixtures" / name) as f:
        return json.load(f)


@pytest.fixture
def forecast_payload() -> dict:
    return _load("openweather_forecast.json")


@pytest.fixture
def current_payload() -> dict:
    return _load("openweather_current.json")


@pytest.fixture
def geocoding_payload() -> list:
    return _load("geocoding_direct.json")


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(
        api_key="test-key",
        base_url=TEST_BASE_URL,
        geocoding_base_url=TEST_GEO_URL,
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a config YAML pointing at the test provider host."""
    data = {
        "provider": {
            "api_key": "test-key",
            "base_url": TEST_BASE_URL,
            "geocoding_base_url": TEST_GEO_URL,
        },
        "location": {"latitude": 51.5085, "longitude": -0.1257},
    }
    path = tmp_path / "weatherapp.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
