"""
Shared test fixtures for scenario generator tests.
"""

import json

import pytest


@pytest.fixture
def scenario_response(scenario_data):
    """Text model output: the scenario fields without the request fields."""
    keys = ("scenario", "genre", "mood", "music", "characters", "settings", "props")
    return json.dumps({key: scenario_data[key] for key in keys})
