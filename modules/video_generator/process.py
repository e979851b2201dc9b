"""
Scene video fan-out.

Every scene with an image gets its own video job. All jobs are submitted at once,
without the shared concurrency cap, and awaited independently; one failure or
timeout never cancels the others.
"""

from typing import List, Optional

from modules.video_generator.generator import coerce_aspect_ratio, generate_scene_video
from shared.errors import ContentSafetyError, GenerationTimeoutError
from shared.generation import run_concurrently
from shared.logging import get_logger, set_scenario_id
from shared.models.result import GenerationResult
from shared.models.scenario import Language, Scenario, Scene
from shared.services import Services

logger = get_logger("video_generator")

NO_IMAGE_MESSAGE = "Scene has no image; generate the scene image first"


async def generate_videos(
    scenes: List[Scene],
    scenario: Scenario,
    language: Language,
    aspect_ratio: str,
    services: Services,
    model: Optional[str] = None,
    generate_audio: Optional[bool] = True,
    duration_seconds: Optional[int] = None,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None
) -> List[GenerationResult]:
    """
    Generate one video per scene.

    Scenes without an image are not submitted. The returned list has one result
    per input scene, in input order: ok(video URI) or fail(message), where a
    scene without an image gets a fail result.

    Args:
        scenes: Scenes to animate
        scenario: Owning scenario (for logging context)
        language: Language of the dialogue
        aspect_ratio: Requested aspect ratio; only "9:16" yields portrait
        services: Collaborator handles
        model: Video model (defaults to settings.video_model)
        generate_audio: Generate native audio (None counts as True)
        duration_seconds: Clip duration (defaults to settings.default_video_duration_seconds)
        poll_interval: Poll interval override in seconds
        timeout: Poll ceiling override in seconds
    """
    set_scenario_id(scenario.name or None)
    generate_audio = generate_audio is not False
    aspect_ratio = coerce_aspect_ratio(aspect_ratio)

    submitted = [index for index, scene in enumerate(scenes) if scene.image_gcs_uri]
    logger.info(
        f"Generating {len(submitted)} scene videos",
        extra={
            "scenes": len(scenes),
            "skipped_without_image": len(scenes) - len(submitted),
            "aspect_ratio": aspect_ratio,
            "model": model,
            "generate_audio": generate_audio,
            "language": language.code
        }
    )

    outcomes = await run_concurrently([
        (lambda scene=scenes[index]: generate_scene_video(
            scene,
            services,
            aspect_ratio=aspect_ratio,
            model=model,
            generate_audio=generate_audio,
            duration_seconds=duration_seconds,
            poll_interval=poll_interval,
            timeout=timeout
        ))
        for index in submitted
    ], concurrency=len(submitted) or 1)

    results: List[GenerationResult] = [GenerationResult.fail(NO_IMAGE_MESSAGE) for _ in scenes]
    for index, outcome in zip(submitted, outcomes):
        if isinstance(outcome, BaseException):
            if isinstance(outcome, GenerationTimeoutError):
                logger.warning(f"Scene {index} video timed out", extra={"scene_index": index})
            elif isinstance(outcome, ContentSafetyError):
                logger.warning(
                    f"Scene {index} video filtered by content safety",
                    extra={"scene_index": index, "reason": outcome.reason}
                )
            else:
                logger.error(
                    f"Scene {index} video failed: {str(outcome)}",
                    extra={"scene_index": index, "error_type": type(outcome).__name__}
                )
            results[index] = GenerationResult.fail(str(outcome) or type(outcome).__name__)
        else:
            results[index] = GenerationResult.ok(outcome)

    logger.info(
        "Scene videos finished",
        extra={"succeeded": sum(1 for result in results if result.success), "scenes": len(scenes)}
    )
    return results
