"""
Consistency-preserving scenario rewrites.

Best-effort text edits that keep the scenario in step with a changed character
or setting. Callers update the entity's image separately through the normal
image generation path.
"""

from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from modules.prompt_builder import build_entity_image_prompt
from modules.regeneration.prompts import (
    CHARACTER_SCENARIO_UPDATE_SCHEMA,
    build_character_from_image_prompt,
    build_character_rewrite_prompt,
    build_setting_rewrite_prompt,
)
from shared.errors import GenerationError, ParseError, PipelineError
from shared.generation import generate_image
from shared.llm_client import parse_json_response
from shared.logging import get_logger
from shared.models.regeneration import (
    CharacterRegeneration,
    CharacterScenarioUpdate,
    ScenarioUpdate,
)
from shared.models.scenario import Entity, ModelConfig
from shared.services import ImagePart, Services, TextPart

logger = get_logger("regeneration")


def _wrap(prefix: str, error: Exception) -> PipelineError:
    """Prefix an error with the failed action, keeping ParseError distinguishable."""
    message = error.message if isinstance(error, PipelineError) else str(error)
    if isinstance(error, ParseError):
        return ParseError(f"{prefix}: {message}")
    return GenerationError(f"{prefix}: {message}")


async def regenerate_character_and_scenario(
    scenario_text: str,
    character_name: str,
    description: str,
    reference_image_uri: str,
    all_characters: List[Entity],
    services: Services,
    model_config: Optional[ModelConfig] = None
) -> CharacterScenarioUpdate:
    """
    Rewrite one character's description and the scenario to match an image.

    Every other character's description and role is preserved.

    Raises:
        ParseError / GenerationError: prefixed "Failed to regenerate character and scenario"
    """
    model_config = model_config or ModelConfig()
    logger.info(
        f"Regenerating character {character_name!r} from image",
        extra={"character": character_name, "image_uri": reference_image_uri, "characters": len(all_characters)}
    )

    try:
        text = await services.text.generate(
            [
                ImagePart(reference_image_uri, mime_type="image/png"),
                TextPart(build_character_from_image_prompt(
                    scenario_text, character_name, description, all_characters
                )),
            ],
            response_format="json",
            json_schema=CHARACTER_SCENARIO_UPDATE_SCHEMA,
            thinking_effort=model_config.thinking_effort,
            model=model_config.text_model
        )
        data = parse_json_response(text)
        try:
            update = CharacterScenarioUpdate.model_validate(data)
        except PydanticValidationError as e:
            raise ParseError(f"Response does not match the expected shape: {str(e)}") from e
    except Exception as e:
        logger.error(f"Failed to regenerate character and scenario: {str(e)}")
        raise _wrap("Failed to regenerate character and scenario", e) from e

    return update


async def regenerate_scenario_from_setting(
    scenario_text: str,
    old_name: str,
    new_name: str,
    new_description: str,
    services: Services,
    model_config: Optional[ModelConfig] = None
) -> ScenarioUpdate:
    """
    Rewrite the scenario after a setting was renamed or redescribed.

    Raises:
        GenerationError: prefixed "Failed to regenerate scenario"
    """
    model_config = model_config or ModelConfig()
    logger.info(
        f"Rewriting scenario for setting {old_name!r} -> {new_name!r}",
        extra={"old_name": old_name, "new_name": new_name}
    )
    try:
        text = await services.text.generate(
            build_setting_rewrite_prompt(scenario_text, old_name, new_name, new_description),
            response_format="text",
            thinking_effort=model_config.thinking_effort,
            model=model_config.text_model
        )
    except Exception as e:
        logger.error(f"Failed to regenerate scenario: {str(e)}")
        raise _wrap("Failed to regenerate scenario", e) from e

    return ScenarioUpdate(updated_scenario=text.strip())


async def regenerate_character_and_scenario_from_text(
    scenario_text: str,
    old_name: str,
    new_name: str,
    new_description: str,
    style: str,
    services: Services,
    model_config: Optional[ModelConfig] = None
) -> CharacterRegeneration:
    """
    Generate a new image for an edited character, then rewrite the scenario.

    Raises:
        GenerationError: "Failed to regenerate character and scenario: ...", with
            "Image generation failed: <message>" inside when the image failed
    """
    model_config = model_config or ModelConfig()
    logger.info(
        f"Regenerating character {old_name!r} -> {new_name!r} from text",
        extra={"old_name": old_name, "new_name": new_name}
    )

    try:
        image = await generate_image(
            services,
            build_entity_image_prompt(style, "character", new_description),
            aspect_ratio="1:1"
        )
        if not image.success:
            raise GenerationError(f"Image generation failed: {image.error_message}")

        text = await services.text.generate(
            build_character_rewrite_prompt(scenario_text, old_name, new_name, new_description),
            response_format="text",
            thinking_effort=model_config.thinking_effort,
            model=model_config.text_model
        )
    except Exception as e:
        logger.error(f"Failed to regenerate character and scenario: {str(e)}")
        raise _wrap("Failed to regenerate character and scenario", e) from e

    return CharacterRegeneration(new_scenario=text.strip(), new_image_gcs_uri=image.value)
