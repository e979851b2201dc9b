"""
Single-image actions: conversational edit and prompt-based regeneration.

All of these return a GenerationResult; nothing here raises on a failed
generation.
"""

from typing import Union

from modules.prompt_builder import build_image_prompt
from shared.generation import generate_image
from shared.logging import get_logger
from shared.models.result import GenerationResult
from shared.models.scenario import ImagePrompt
from shared.services import ImagePart, Services, TextPart

logger = get_logger("regeneration")

EDIT_FAILED_MESSAGE = "Failed to edit image"
EDIT_ERROR_MESSAGE = "An error occurred while editing the image"


async def conversational_edit(
    image_gcs_uri: str,
    instruction: str,
    services: Services
) -> GenerationResult:
    """
    Edit an existing image with a natural-language instruction.

    The current image is sent as a reference part followed by the instruction.
    """
    logger.info("Starting conversational edit", extra={"image_uri": image_gcs_uri})
    try:
        result = await services.reference_image.generate([
            ImagePart(image_gcs_uri, mime_type="image/png"),
            TextPart(instruction),
        ])
    except Exception as e:
        logger.error(f"Error in conversational edit: {str(e)}", exc_info=True)
        return GenerationResult.fail(EDIT_ERROR_MESSAGE)

    if result.success and result.value:
        logger.info("Edited image", extra={"image_uri": image_gcs_uri, "new_image_uri": result.value})
        return GenerationResult.ok(result.value)

    logger.error(f"Failed to edit image: {result.error_message}", extra={"image_uri": image_gcs_uri})
    if result.error_message:
        return GenerationResult.fail(f"{EDIT_FAILED_MESSAGE}: {result.error_message}")
    return GenerationResult.fail(EDIT_FAILED_MESSAGE)


async def regenerate_image(
    prompt: Union[str, ImagePrompt],
    services: Services,
    aspect_ratio: str = "16:9"
) -> GenerationResult:
    """Regenerate a scene image from a plain or structured prompt."""
    prompt_text = prompt if isinstance(prompt, str) else build_image_prompt(prompt)
    logger.info("Regenerating image", extra={"structured": not isinstance(prompt, str), "aspect_ratio": aspect_ratio})
    return await generate_image(services, prompt_text, aspect_ratio=aspect_ratio)


async def regenerate_character_image(prompt: str, services: Services) -> GenerationResult:
    """Regenerate a character portrait: square, without prompt enhancement."""
    logger.info("Regenerating character image")
    return await generate_image(services, prompt, aspect_ratio="1:1", enhance_prompt=False)
