"""
Shared test fixtures for storyboard generator tests.
"""

import json

import pytest


def _make_scene(index, subject=("Ada",), props=("Bottle",), context=("Gull Island",), characters_present=("Ada",)):
    """Scene in wire format, as returned by the text model."""
    return {
        "imagePrompt": {
            "Style": "Photographic",
            "Scene": f"Scene {index} at the lighthouse",
            "Composition": {"shot_type": "Medium Shot", "lighting": "Overcast", "overall_mood": "Quiet"},
            "Subject": [{"name": name} for name in subject],
            "Prop": [{"name": name} for name in props],
            "Context": [{"name": name} for name in context],
        },
        "videoPrompt": {
            "Action": f"Action {index}",
            "Camera_Motion": "Static",
            "Ambiance_Audio": "Waves",
            "Dialogue": [],
        },
        "description": f"Description {index}",
        "voiceover": f"Voiceover {index}",
        "charactersPresent": list(characters_present),
    }


@pytest.fixture
def scenario_with_images(scenario):
    """Scenario whose entities all have reference images."""
    data = scenario.to_wire()
    for key in ("characters", "settings", "props"):
        for entity in data[key]:
            entity["imageGcsUri"] = f"gs://test-bucket/images/{entity['name'].replace(' ', '-').lower()}.png"
    return type(scenario).model_validate(data)


@pytest.fixture
def scenes_response():
    def _response(count):
        return json.dumps({"scenes": [_make_scene(i) for i in range(count)]})
    return _response


@pytest.fixture
def make_scene():
    """Factory for wire-format scenes."""
    return _make_scene
