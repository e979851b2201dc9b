"""
Root pytest configuration.

Settings are loaded at import time, so the environment must be populated
before any test module imports shared.config.
"""

import os

import pytest

TEST_ENV = {
    "OPENAI_API_KEY": "sk-test123456789012345678901234567890",
    "REPLICATE_API_TOKEN": "r8_test123456789012345678901234567890",
    "GCP_PROJECT_ID": "test-project",
    "GCS_BUCKET": "test-bucket",
    "ENVIRONMENT": "development",
    "LOG_LEVEL": "DEBUG",
}


def pytest_configure(config):
    for key, value in TEST_ENV.items():
        os.environ.setdefault(key, value)


@pytest.fixture
def test_env_vars(monkeypatch):
    """Set the test environment explicitly for tests that build Settings."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    return TEST_ENV


@pytest.fixture
def language():
    from shared.models import Language

    return Language(name="English (United States)", code="en-US")


@pytest.fixture
def scenario_data():
    """Scenario in wire format, as the text model returns it merged with request fields."""
    return {
        "name": "The Lighthouse",
        "pitch": "A lighthouse keeper finds a message in a bottle",
        "style": "Photographic",
        "aspectRatio": "16:9",
        "durationSeconds": 8,
        "language": {"name": "English (United States)", "code": "en-US"},
        "scenario": "Ada, an old lighthouse keeper, finds a bottle on the shore of Gull Island.",
        "genre": "Cinematic",
        "mood": "Calm",
        "music": "Soft piano with distant waves",
        "characters": [
            {"name": "Ada", "description": "A weathered woman in her sixties with a grey braid"},
            {"name": "Tom", "description": "A young fisherman in a yellow raincoat"},
        ],
        "settings": [
            {"name": "Gull Island", "description": "A rocky island with a white lighthouse"},
        ],
        "props": [
            {"name": "Bottle", "description": "A green glass bottle sealed with wax"},
        ],
    }


@pytest.fixture
def scenario(scenario_data):
    from shared.models import Scenario

    return Scenario.model_validate(scenario_data)


@pytest.fixture
def mock_services():
    """Services container with every collaborator mocked."""
    from unittest.mock import AsyncMock, MagicMock

    from shared.services import Services

    storage = MagicMock()
    storage.upload = AsyncMock(side_effect=lambda data, key, content_type=None: f"gs://test-bucket/{key}")
    storage.download = AsyncMock(return_value=b"data")
    storage.get_signed_url = AsyncMock(side_effect=lambda uri, download=False: f"https://signed.example/{uri[5:]}")
    storage.get_mime_type = AsyncMock(return_value="image/png")

    return Services(
        text=MagicMock(generate=AsyncMock()),
        image=MagicMock(generate=AsyncMock()),
        reference_image=MagicMock(generate=AsyncMock()),
        video=MagicMock(submit=AsyncMock(), poll=AsyncMock()),
        storage=storage,
        speech=MagicMock(synthesize=AsyncMock(return_value=b"mp3")),
        music=MagicMock(generate=AsyncMock(return_value=b"mp3")),
    )
