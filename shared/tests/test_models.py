"""
Tests for the scenario and result models.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from shared.models import GenerationResult, Scenario, Scene


def test_scenario_parses_wire_format(scenario):
    assert scenario.aspect_ratio == "16:9"
    assert scenario.language.code == "en-US"
    assert [c.name for c in scenario.characters] == ["Ada", "Tom"]
    assert scenario.characters[0].image_gcs_uri is None


def test_scenario_wire_round_trip_uses_camel_case(scenario):
    wire = scenario.to_wire()

    assert "aspectRatio" in wire
    assert "imageGcsUri" in wire["characters"][0]
    assert Scenario.model_validate(wire) == scenario


@pytest.mark.parametrize("raw,expected", [("cinematic", "Cinematic"), ("  HIP-HOP   &  rap ", "Hip-Hop & Rap")])
def test_genre_is_canonicalized(scenario_data, raw, expected):
    scenario_data["genre"] = raw

    assert Scenario.model_validate(scenario_data).genre == expected


def test_unknown_mood_rejected(scenario_data):
    scenario_data["mood"] = "Grumpy"

    with pytest.raises(PydanticValidationError):
        Scenario.model_validate(scenario_data)


def test_duplicate_character_names_rejected(scenario_data):
    scenario_data["characters"].append({"name": "Ada", "description": "Another Ada"})

    with pytest.raises(PydanticValidationError, match="Duplicate name"):
        Scenario.model_validate(scenario_data)


def test_missing_props_defaults_to_empty(scenario_data):
    scenario_data["props"] = None

    assert Scenario.model_validate(scenario_data).props == []


def test_description_lines_are_joined(scenario_data):
    scenario_data["characters"][0]["description"] = ["Grey braid", "Oilskin coat"]

    assert Scenario.model_validate(scenario_data).characters[0].description == "Grey braid\nOilskin coat"


def test_deep_copy_is_independent(scenario):
    copy = scenario.deep_copy()
    copy.characters[0].image_gcs_uri = "gs://test-bucket/images/ada.png"

    assert copy == copy.deep_copy()
    assert scenario.characters[0].image_gcs_uri is None


def test_scene_prompt_aliases():
    scene = Scene.model_validate({
        "imagePrompt": {
            "Style": "Photographic",
            "Scene": "A beach at dawn",
            "Composition": {"shot_type": "Wide Shot", "lighting": "Golden", "overall_mood": "Calm"},
            "Subject": [{"name": "Ada"}],
        },
        "videoPrompt": {
            "Action": "Ada walks",
            "Camera_Motion": "Slow pan",
            "Ambiance_Audio": "Waves",
            "Dialogue": [{"speaker": "Grey-haired woman", "line": "Hello"}],
        },
        "description": "Ada on the beach",
        "voiceover": "It began at dawn.",
    })

    assert scene.image_prompt.subject[0].name == "Ada"
    assert scene.image_prompt.prop == []
    assert scene.video_prompt.dialogue[0].line == "Hello"
    assert scene.characters_present == []


def test_generation_result_variants():
    ok = GenerationResult.ok("gs://test-bucket/a.png")
    failed = GenerationResult.fail("Image service returned no image")

    assert ok.success and ok.value == "gs://test-bucket/a.png" and ok.error_message is None
    assert not failed.success and failed.error_message == "Image service returned no image"
    assert failed.model_dump(by_alias=True)["errorMessage"] == "Image service returned no image"


def test_generation_result_fail_never_empty():
    assert GenerationResult.fail("").error_message == "Unknown error"


def test_generation_result_rejects_mixed_variant():
    with pytest.raises(PydanticValidationError):
        GenerationResult(success=True, value="x", error_message="boom")
