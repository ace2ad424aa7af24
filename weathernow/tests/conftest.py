"""Shared test fixtures."""

import json
from datetime import UTC
from pathlib import Path

import pytest
import yaml

from weathernow.config.schema import AppConfig, DisplayConfig, ProviderConfig
from weathernow.ingest.openweather_client import OpenWeatherClient

TEST_BASE_URL = "https://test-owm.example.com/data/2.5"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def current_payload(fixtures_dir: Path) -> dict:
    with open(fixtures_dir / "owm_current_london.json") as f:
        return json.load(f)


@pytest.fixture
def forecast_payload(fixtures_dir: Path) -> dict:
    with open(fixtures_dir / "owm_forecast_london.json") as f:
        return json.load(f)


@pytest.fixture
def client() -> OpenWeatherClient:
    return OpenWeatherClient(api_key="test-key", base_url=TEST_BASE_URL)


@pytest.fixture
def utc():
    return UTC


@pytest.fixture
def test_config() -> AppConfig:
    """Config pointed at the mocked provider, bucketing days in UTC."""
    return AppConfig(
        provider=ProviderConfig(api_key="test-key", base_url=TEST_BASE_URL),
        display=DisplayConfig(timezone="UTC"),
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "provider": {"api_key": "yaml-key", "base_url": TEST_BASE_URL},
        "display": {"max_days": 5, "timezone": "UTC"},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
