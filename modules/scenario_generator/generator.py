"""
Scenario generation.

Text model call → parse and validate → parallel entity image generation.
Steps up to validation are fatal; entity image failures are isolated per entity.
"""

import asyncio
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from modules.prompt_builder import build_entity_image_prompt
from modules.scenario_generator.prompts import build_scenario_prompt
from shared.errors import GenerationError, ParseError, PipelineError
from shared.generation import as_result, generate_image, run_concurrently
from shared.llm_client import parse_json_response
from shared.logging import get_logger, set_scenario_id
from shared.models.result import GenerationResult
from shared.models.scenario import Entity, EntityKind, Language, ModelConfig, Scenario
from shared.services import Services

logger = get_logger("scenario_generator")

SQUARE = "1:1"


def entity_aspect_ratio(kind: EntityKind, scenario_aspect_ratio: str) -> str:
    """Settings follow the movie frame; characters and props are square portraits."""
    return scenario_aspect_ratio if kind == "setting" else SQUARE


async def generate_entity_image(
    entity: Entity,
    kind: EntityKind,
    style: str,
    aspect_ratio: str,
    services: Services
) -> GenerationResult:
    """Generate the reference image of one character, setting or prop."""
    prompt = build_entity_image_prompt(style, kind, entity.description)
    result = await generate_image(
        services,
        prompt,
        aspect_ratio=entity_aspect_ratio(kind, aspect_ratio),
        enhance_prompt=False
    )
    if not result.success:
        logger.warning(
            f"No image for {kind} {entity.name!r}: {result.error_message}",
            extra={"entity_kind": kind, "entity_name": entity.name}
        )
    return result


async def generate_entity_images(
    entities: List[Entity],
    kind: EntityKind,
    style: str,
    aspect_ratio: str,
    services: Services
) -> List[Entity]:
    """
    Generate images for a list of entities concurrently.

    Returns new Entity objects in input order; an entity whose image failed is
    returned with image_gcs_uri=None.
    """
    outcomes = await run_concurrently([
        (lambda entity=entity: generate_entity_image(entity, kind, style, aspect_ratio, services))
        for entity in entities
    ])

    updated = []
    for entity, outcome in zip(entities, outcomes):
        result = as_result(outcome)
        updated.append(entity.model_copy(update={"image_gcs_uri": result.value if result.success else None}))
    return updated


def _scenario_from_response(
    text: str,
    name: str,
    pitch: str,
    style: str,
    aspect_ratio: str,
    duration_seconds: int,
    language: Language
) -> Scenario:
    data = parse_json_response(text)
    if not isinstance(data, dict):
        raise ParseError("Failed to parse AI response: expected a JSON object")

    data.update({
        "name": name,
        "pitch": pitch,
        "style": style,
        "aspectRatio": aspect_ratio,
        "durationSeconds": duration_seconds,
        "language": language.model_dump(),
    })
    if not data.get("props"):
        data["props"] = []
    # Scenes are produced by the storyboard step, never by this prompt
    data["scenes"] = []

    try:
        return Scenario.model_validate(data)
    except PydanticValidationError as e:
        raise ParseError(f"AI response does not match the scenario schema: {str(e)}") from e


async def generate_scenario(
    name: str,
    pitch: str,
    num_scenes: int,
    style: str,
    aspect_ratio: str,
    duration_seconds: int,
    language: Language,
    services: Services,
    model_config: Optional[ModelConfig] = None
) -> Scenario:
    """
    Generate a scenario from a pitch, with reference images for every entity.

    Args:
        name: Scenario name
        pitch: Story pitch
        num_scenes: Number of storyboard scenes the story should support
        style: Visual style of every image
        aspect_ratio: Movie aspect ratio (used for setting images)
        duration_seconds: Clip duration per scene
        language: Language of the scenario text
        services: Collaborator handles
        model_config: Optional text model overrides

    Returns:
        Scenario with image_gcs_uri set on every entity whose image succeeded

    Raises:
        ParseError: Model output was not valid JSON or did not match the schema
        GenerationError: The text model call failed
    """
    model_config = model_config or ModelConfig()
    set_scenario_id(name or None)

    logger.info(
        f"Generating scenario {name!r}",
        extra={"num_scenes": num_scenes, "style": style, "aspect_ratio": aspect_ratio, "language": language.code}
    )

    try:
        prompt = build_scenario_prompt(pitch, num_scenes, style, language)
        text = await services.text.generate(
            prompt,
            response_format="json",
            thinking_effort=model_config.thinking_effort,
            model=model_config.text_model
        )
        scenario = _scenario_from_response(
            text, name, pitch, style, aspect_ratio, duration_seconds, language
        )
    except ParseError as e:
        logger.error(f"Failed to generate scenario: {e.message}")
        raise ParseError(f"Failed to generate scenario: {e.message}") from e
    except PipelineError as e:
        logger.error(f"Failed to generate scenario: {e.message}")
        raise GenerationError(f"Failed to generate scenario: {e.message}") from e
    except Exception as e:
        logger.error(f"Failed to generate scenario: {str(e)}", exc_info=True)
        raise GenerationError(f"Failed to generate scenario: {str(e)}") from e

    characters, settings_, props = await asyncio.gather(
        generate_entity_images(scenario.characters, "character", style, aspect_ratio, services),
        generate_entity_images(scenario.settings, "setting", style, aspect_ratio, services),
        generate_entity_images(scenario.props, "prop", style, aspect_ratio, services),
    )

    scenario = scenario.model_copy(update={
        "characters": characters,
        "settings": settings_,
        "props": props,
    })

    logger.info(
        f"Generated scenario {name!r}",
        extra={
            "characters": len(characters),
            "settings": len(settings_),
            "props": len(props),
            "images_missing": sum(
                1 for entity in characters + settings_ + props if not entity.image_gcs_uri
            ),
            "genre": scenario.genre,
            "mood": scenario.mood
        }
    )
    return scenario
