"""
Tests for scenario generation.
"""

import json

import pytest

from modules.scenario_generator import generate_entity_images, generate_scenario
from modules.scenario_generator.generator import entity_aspect_ratio
from modules.scenario_generator.prompts import build_scenario_prompt
from shared.errors import GenerationError, ParseError
from shared.models import Entity, ModelConfig
from shared.services import ImageGenerationResponse, ImagePrediction


def _image_ok(prompt, aspect_ratio="16:9", enhance_prompt=False):
    kind = prompt.split("shot_type: ", 1)[1].split("\n", 1)[0]
    return ImageGenerationResponse(predictions=[ImagePrediction(gcs_uri=f"gs://test-bucket/images/{kind}.png")])


async def _generate(services, language, **overrides):
    kwargs = dict(
        name="The Lighthouse",
        pitch="A lighthouse keeper finds a message in a bottle",
        num_scenes=4,
        style="Photographic",
        aspect_ratio="16:9",
        duration_seconds=8,
        language=language,
        services=services,
    )
    kwargs.update(overrides)
    return await generate_scenario(**kwargs)


def test_entity_aspect_ratio():
    assert entity_aspect_ratio("setting", "9:16") == "9:16"
    assert entity_aspect_ratio("character", "9:16") == "1:1"
    assert entity_aspect_ratio("prop", "16:9") == "1:1"


def test_prompt_lists_allowed_genres_and_language(language):
    prompt = build_scenario_prompt("A pitch", 4, "Photographic", language)

    assert "A pitch" in prompt
    assert "English (United States)" in prompt
    assert "Cinematic" in prompt and "Calm" in prompt


@pytest.mark.asyncio
async def test_generate_scenario_end_to_end(mock_services, language, scenario_response):
    mock_services.text.generate.return_value = scenario_response
    mock_services.image.generate.side_effect = _image_ok

    scenario = await _generate(mock_services, language)

    assert scenario.name == "The Lighthouse"
    assert scenario.aspect_ratio == "16:9"
    assert scenario.language == language
    assert scenario.genre == "Cinematic"
    assert scenario.scenes == []
    assert [c.image_gcs_uri for c in scenario.characters] == [
        "gs://test-bucket/images/Medium Shot.png",
        "gs://test-bucket/images/Medium Shot.png",
    ]
    assert scenario.settings[0].image_gcs_uri == "gs://test-bucket/images/Wide Shot.png"
    assert scenario.props[0].image_gcs_uri == "gs://test-bucket/images/Close Shot.png"
    assert mock_services.image.generate.await_count == 4


@pytest.mark.asyncio
async def test_setting_images_use_movie_aspect_ratio(mock_services, language, scenario_response):
    mock_services.text.generate.return_value = scenario_response
    mock_services.image.generate.side_effect = _image_ok

    await _generate(mock_services, language, aspect_ratio="9:16")

    ratios = {
        call.args[0].split("shot_type: ", 1)[1].split("\n", 1)[0]: call.kwargs["aspect_ratio"]
        for call in mock_services.image.generate.await_args_list
    }
    assert ratios == {"Medium Shot": "1:1", "Wide Shot": "9:16", "Close Shot": "1:1"}


@pytest.mark.asyncio
async def test_model_config_forwarded(mock_services, language, scenario_response):
    mock_services.text.generate.return_value = scenario_response
    mock_services.image.generate.side_effect = _image_ok

    await _generate(mock_services, language, model_config=ModelConfig(text_model="o3", thinking_effort="high"))

    kwargs = mock_services.text.generate.await_args.kwargs
    assert kwargs["model"] == "o3"
    assert kwargs["thinking_effort"] == "high"
    assert kwargs["response_format"] == "json"


@pytest.mark.asyncio
async def test_entity_image_failure_is_isolated(mock_services, language, scenario_response):
    def _fail_for_tom(prompt, aspect_ratio="16:9", enhance_prompt=False):
        if "yellow raincoat" in prompt:
            return ImageGenerationResponse(predictions=[ImagePrediction(rai_filtered_reason="Support codes: 39322892")])
        return _image_ok(prompt, aspect_ratio, enhance_prompt)

    mock_services.text.generate.return_value = scenario_response
    mock_services.image.generate.side_effect = _fail_for_tom

    scenario = await _generate(mock_services, language)

    assert scenario.characters[0].image_gcs_uri is not None
    assert scenario.characters[1].image_gcs_uri is None
    assert scenario.settings[0].image_gcs_uri is not None


@pytest.mark.asyncio
async def test_fenced_response_accepted(mock_services, language, scenario_response):
    mock_services.text.generate.return_value = f"```json\n{scenario_response}\n```"
    mock_services.image.generate.side_effect = _image_ok

    scenario = await _generate(mock_services, language)

    assert len(scenario.characters) == 2


@pytest.mark.asyncio
async def test_missing_props_become_empty(mock_services, language, scenario_response):
    data = json.loads(scenario_response)
    del data["props"]
    mock_services.text.generate.return_value = json.dumps(data)
    mock_services.image.generate.side_effect = _image_ok

    scenario = await _generate(mock_services, language)

    assert scenario.props == []


@pytest.mark.asyncio
async def test_invalid_json_raises_parse_error(mock_services, language):
    mock_services.text.generate.return_value = "Sorry, I cannot help with that."

    with pytest.raises(ParseError, match="Failed to generate scenario: Failed to parse AI response"):
        await _generate(mock_services, language)

    mock_services.image.generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_schema_mismatch_raises_parse_error(mock_services, language, scenario_response):
    data = json.loads(scenario_response)
    data["genre"] = "Polka"
    mock_services.text.generate.return_value = json.dumps(data)

    with pytest.raises(ParseError, match="Failed to generate scenario"):
        await _generate(mock_services, language)


@pytest.mark.asyncio
async def test_text_model_failure_raises_generation_error(mock_services, language):
    mock_services.text.generate.side_effect = GenerationError("OpenAI API error: 400")

    with pytest.raises(GenerationError, match="Failed to generate scenario: OpenAI API error: 400"):
        await _generate(mock_services, language)


@pytest.mark.asyncio
async def test_generate_entity_images_keeps_order(mock_services):
    mock_services.image.generate.side_effect = [
        ImageGenerationResponse(predictions=[ImagePrediction(gcs_uri="gs://test-bucket/images/a.png")]),
        RuntimeError("boom"),
        ImageGenerationResponse(predictions=[ImagePrediction(gcs_uri="gs://test-bucket/images/c.png")]),
    ]
    entities = [Entity(name=n, description=f"{n} description") for n in ("A", "B", "C")]

    updated = await generate_entity_images(entities, "prop", "Anime", "16:9", mock_services)

    assert [e.name for e in updated] == ["A", "B", "C"]
    assert [e.image_gcs_uri for e in updated] == ["gs://test-bucket/images/a.png", None, "gs://test-bucket/images/c.png"]
    assert entities[0].image_gcs_uri is None
