"""
Single-scene video generation.

Submits an image-to-video job for one scene and polls it to completion with a
fixed interval and a hard ceiling. Timing out only stops the local wait; the
remote job is not cancelled.
"""

import asyncio
import time
from typing import Optional

from modules.content_safety import is_content_filtered, translate
from modules.prompt_builder import build_video_prompt
from shared.config import settings
from shared.errors import ContentSafetyError, GenerationError, GenerationTimeoutError, RetryableError
from shared.logging import get_logger
from shared.models.scenario import Scene
from shared.services import Services

logger = get_logger("video_generator")

SUBTITLES_OFF = "\nSubtitles: off"


def coerce_aspect_ratio(requested: Optional[str]) -> str:
    """Portrait only when explicitly requested; everything else is landscape."""
    return "9:16" if requested == "9:16" else "16:9"


def scene_video_prompt(scene: Scene) -> str:
    """Video prompt text for a scene, with burned-in subtitles disabled."""
    return build_video_prompt(scene.video_prompt) + SUBTITLES_OFF


async def wait_for_operation(
    services: Services,
    operation: str,
    model: str,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None
) -> str:
    """
    Poll a video job until it is done and return the video URI.

    Raises:
        GenerationTimeoutError: The job did not finish within the timeout
        ContentSafetyError: The provider filtered the output (translated message)
        GenerationError: The job finished with an error or without a video
    """
    poll_interval = poll_interval if poll_interval is not None else settings.video_poll_interval_seconds
    timeout = timeout if timeout is not None else settings.video_poll_timeout_seconds
    deadline = time.monotonic() + timeout
    polls = 0

    while True:
        if time.monotonic() > deadline:
            raise GenerationTimeoutError(
                f"Video generation timed out after {timeout:.0f}s; please try again later"
            )

        polls += 1
        try:
            status = await services.video.poll(operation, model)
        except RetryableError as e:
            logger.warning(
                f"Transient error polling {operation}, will poll again",
                extra={"operation": operation, "error": str(e), "polls": polls}
            )
        else:
            if status.done:
                if status.error:
                    if is_content_filtered(status.error):
                        raise ContentSafetyError(translate(status.error), reason=status.error)
                    raise GenerationError(f"Video generation failed: {status.error}")
                if status.rai_media_filtered_reasons:
                    reason = status.rai_media_filtered_reasons[0]
                    raise ContentSafetyError(translate(reason), reason=reason)
                if not status.videos:
                    raise GenerationError(f"Video job {operation} finished without a video")
                logger.info(
                    f"Video job {operation} finished",
                    extra={"operation": operation, "polls": polls, "video_uri": status.videos[0]}
                )
                return status.videos[0]

        await asyncio.sleep(poll_interval)


async def generate_scene_video(
    scene: Scene,
    services: Services,
    aspect_ratio: str = "16:9",
    model: Optional[str] = None,
    generate_audio: bool = True,
    duration_seconds: Optional[int] = None,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None
) -> str:
    """
    Generate the video clip of one scene from its first-frame image.

    Returns:
        Video URI
    """
    if not scene.image_gcs_uri:
        raise GenerationError("Scene has no image to generate a video from")

    model = model or settings.video_model
    duration_seconds = duration_seconds or settings.default_video_duration_seconds

    operation = await services.video.submit(
        scene_video_prompt(scene),
        scene.image_gcs_uri,
        coerce_aspect_ratio(aspect_ratio),
        model,
        generate_audio,
        duration_seconds
    )
    return await wait_for_operation(services, operation, model, poll_interval, timeout)
