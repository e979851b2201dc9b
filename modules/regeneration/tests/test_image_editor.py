"""
Tests for conversational edits and image regeneration.
"""

import pytest

from modules.regeneration import conversational_edit, regenerate_character_image, regenerate_image
from modules.regeneration.image_editor import EDIT_ERROR_MESSAGE, EDIT_FAILED_MESSAGE
from shared.models import GenerationResult, ImagePrompt
from shared.services import ImageGenerationResponse, ImagePart, ImagePrediction, TextPart


def _ok(uri="gs://test-bucket/images/new.png"):
    return ImageGenerationResponse(predictions=[ImagePrediction(gcs_uri=uri)])


@pytest.mark.asyncio
async def test_conversational_edit_success(mock_services):
    mock_services.reference_image.generate.return_value = GenerationResult.ok("gs://test-bucket/images/gemini-2.png")

    result = await conversational_edit("gs://test-bucket/images/old.png", "Make it night", mock_services)

    assert result == GenerationResult.ok("gs://test-bucket/images/gemini-2.png")
    mock_services.reference_image.generate.assert_awaited_once_with([
        ImagePart("gs://test-bucket/images/old.png", mime_type="image/png"),
        TextPart("Make it night"),
    ])


@pytest.mark.asyncio
async def test_conversational_edit_failure(mock_services):
    mock_services.reference_image.generate.return_value = GenerationResult.fail("blocked")

    result = await conversational_edit("gs://test-bucket/images/old.png", "Add a tank", mock_services)

    assert not result.success
    assert result.error_message.startswith(EDIT_FAILED_MESSAGE)
    assert "blocked" in result.error_message


@pytest.mark.asyncio
async def test_conversational_edit_exception(mock_services):
    mock_services.reference_image.generate.side_effect = RuntimeError("socket closed")

    result = await conversational_edit("gs://test-bucket/images/old.png", "Make it night", mock_services)

    assert result == GenerationResult.fail(EDIT_ERROR_MESSAGE)


@pytest.mark.asyncio
async def test_regenerate_image_from_text(mock_services):
    mock_services.image.generate.return_value = _ok()

    result = await regenerate_image("A lighthouse at night", mock_services, aspect_ratio="9:16")

    assert result.value == "gs://test-bucket/images/new.png"
    mock_services.image.generate.assert_awaited_once_with(
        "A lighthouse at night", aspect_ratio="9:16", enhance_prompt=False
    )


@pytest.mark.asyncio
async def test_regenerate_image_from_structured_prompt(mock_services):
    mock_services.image.generate.return_value = _ok()
    prompt = ImagePrompt.model_validate({
        "Style": "Anime",
        "Scene": "A lighthouse at night",
        "Composition": {"shot_type": "Wide Shot", "lighting": "Moonlight", "overall_mood": "Eerie"},
    })

    await regenerate_image(prompt, mock_services)

    sent = mock_services.image.generate.await_args.args[0]
    assert sent.startswith("Style: Anime\nScene: A lighthouse at night\n")


@pytest.mark.asyncio
async def test_regenerate_character_image_is_square(mock_services):
    mock_services.image.generate.return_value = _ok()

    await regenerate_character_image("A tall woman", mock_services)

    mock_services.image.generate.assert_awaited_once_with("A tall woman", aspect_ratio="1:1", enhance_prompt=False)
