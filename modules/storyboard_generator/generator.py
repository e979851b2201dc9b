"""
Storyboard generation.

Text model call with a strict schema → parse and validate the scenes →
per-scene image generation in parallel. A scene whose image fails keeps
image_gcs_uri=None and carries an error_message; its siblings are unaffected.
"""

from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from modules.prompt_builder import build_image_prompt
from modules.storyboard_generator.prompts import STORYBOARD_SCHEMA, build_scenes_prompt
from modules.storyboard_generator.reference_resolver import inline_descriptions, resolve_references
from shared.config import settings
from shared.errors import GenerationError, ParseError, PipelineError
from shared.generation import as_result, generate_image, run_concurrently
from shared.llm_client import parse_json_response
from shared.logging import get_logger, set_scenario_id
from shared.models.result import GenerationResult
from shared.models.scenario import Language, ModelConfig, Scenario, Scene
from shared.services import ImagePart, PromptPart, Services, TextPart

logger = get_logger("storyboard_generator")


def _scenes_from_response(text: str) -> List[Scene]:
    data = parse_json_response(text)
    raw_scenes = data.get("scenes") if isinstance(data, dict) else data
    if not isinstance(raw_scenes, list):
        raise ParseError("Failed to parse AI response: expected a list of scenes")

    scenes = []
    for index, raw in enumerate(raw_scenes):
        try:
            scenes.append(Scene.model_validate(raw))
        except PydanticValidationError as e:
            raise ParseError(f"Scene {index} does not match the scene schema: {str(e)}") from e
    return scenes


def reference_parts(scene: Scene, scenario: Scenario) -> List[PromptPart]:
    """
    Prompt parts for reference-conditioned generation.

    Each resolved entity with an image contributes its name followed by its
    image; the reduced YAML prompt comes last.
    """
    resolved = resolve_references(scenario, scene.image_prompt)
    parts: List[PromptPart] = []
    for entity in resolved.all():
        if entity.image_gcs_uri:
            parts.append(TextPart(entity.name))
            parts.append(ImagePart(entity.image_gcs_uri, mime_type="image/png"))
    parts.append(TextPart(build_image_prompt(scene.image_prompt, with_references=True)))
    return parts


async def generate_scene_image(
    scene: Scene,
    scenario: Scenario,
    services: Services,
    use_references: Optional[bool] = None
) -> GenerationResult:
    """
    Generate the first-frame image of one scene.

    Reference mode is used when the scene has characters present and reference
    images are enabled; otherwise the fully inlined text prompt goes to the
    text-to-image service.
    """
    if use_references is None:
        use_references = settings.use_reference_images

    if use_references and scene.characters_present:
        parts = reference_parts(scene, scenario)
        logger.debug(
            "Generating scene image with references",
            extra={"references": sum(1 for part in parts if isinstance(part, ImagePart))}
        )
        try:
            return await services.reference_image.generate(parts)
        except Exception as e:
            logger.error(f"Reference image generation raised: {str(e)}", exc_info=True)
            return GenerationResult.fail(str(e) or type(e).__name__)

    prompt = build_image_prompt(inline_descriptions(scenario, scene.image_prompt))
    return await generate_image(services, prompt, aspect_ratio=scenario.aspect_ratio)


async def generate_storyboard(
    scenario: Scenario,
    num_scenes: int,
    style: str,
    language: Language,
    services: Services,
    model_config: Optional[ModelConfig] = None,
    use_references: Optional[bool] = None
) -> Scenario:
    """
    Generate the scenes of a scenario and their images.

    Args:
        scenario: Scenario with entities (and their reference images)
        num_scenes: Number of scenes to request
        style: Visual style of the scene images
        language: Language of descriptions, voiceovers and dialogue
        services: Collaborator handles
        model_config: Optional text model overrides
        use_references: Override of settings.use_reference_images

    Returns:
        A new Scenario with scenes populated; the input is not modified

    Raises:
        ParseError: Model output was not valid JSON or did not match the schema
        GenerationError: The text model call failed
    """
    model_config = model_config or ModelConfig()
    set_scenario_id(scenario.name or None)

    logger.info(
        f"Generating storyboard for {scenario.name!r}",
        extra={"num_scenes": num_scenes, "style": style, "language": language.code}
    )

    try:
        text = await services.text.generate(
            build_scenes_prompt(scenario, num_scenes, style, language),
            response_format="json",
            json_schema=STORYBOARD_SCHEMA,
            thinking_effort=model_config.thinking_effort,
            model=model_config.text_model
        )
        scenes = _scenes_from_response(text)
    except ParseError as e:
        logger.error(f"Failed to generate storyboard: {e.message}")
        raise ParseError(f"Failed to generate storyboard: {e.message}") from e
    except PipelineError as e:
        logger.error(f"Failed to generate storyboard: {e.message}")
        raise GenerationError(f"Failed to generate storyboard: {e.message}") from e
    except Exception as e:
        logger.error(f"Failed to generate storyboard: {str(e)}", exc_info=True)
        raise GenerationError(f"Failed to generate storyboard: {str(e)}") from e

    if len(scenes) != num_scenes:
        logger.warning(
            f"Model returned {len(scenes)} scenes, {num_scenes} requested",
            extra={"returned": len(scenes), "requested": num_scenes}
        )

    outcomes = await run_concurrently([
        (lambda scene=scene: generate_scene_image(scene, scenario, services, use_references))
        for scene in scenes
    ])

    updated_scenes = []
    for index, (scene, outcome) in enumerate(zip(scenes, outcomes)):
        result = as_result(outcome)
        if result.success:
            updated_scenes.append(scene.model_copy(update={"image_gcs_uri": result.value, "error_message": None}))
        else:
            logger.warning(
                f"Scene {index} image failed: {result.error_message}",
                extra={"scene_index": index}
            )
            updated_scenes.append(scene.model_copy(update={"image_gcs_uri": None, "error_message": result.error_message}))

    logger.info(
        f"Generated storyboard for {scenario.name!r}",
        extra={
            "scenes": len(updated_scenes),
            "images_failed": sum(1 for scene in updated_scenes if not scene.image_gcs_uri)
        }
    )
    return scenario.model_copy(update={"scenes": updated_scenes}).deep_copy()
