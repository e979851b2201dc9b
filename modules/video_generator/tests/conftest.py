"""
Shared test fixtures for video generator tests.
"""

import pytest

from shared.models import Scene


@pytest.fixture
def make_video_scene():
    """Factory for scenes with (or without) a first-frame image."""
    def _make(index=0, image_gcs_uri="gs://test-bucket/images/scene.png"):
        return Scene.model_validate({
            "imagePrompt": {
                "Style": "Photographic",
                "Scene": f"Scene {index}",
                "Composition": {"shot_type": "Wide Shot", "lighting": "Dusk", "overall_mood": "Calm"},
            },
            "videoPrompt": {
                "Action": f"Action {index}",
                "Camera_Motion": "Dolly in",
                "Ambiance_Audio": "Rain",
                "Dialogue": [{"speaker": "Young fisherman", "line": "Storm's coming."}],
            },
            "description": f"Description {index}",
            "voiceover": "",
            "imageGcsUri": image_gcs_uri,
        })
    return _make
