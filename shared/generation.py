"""
Orchestration helpers shared by the generators.

- run_concurrently: bounded fan-out that keeps input order
- generate_image: one schema-based image call folded into a GenerationResult
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar, Union

from modules.content_safety import translate
from shared.config import settings
from shared.logging import get_logger
from shared.models.result import GenerationResult
from shared.services import Services

T = TypeVar("T")
logger = get_logger("generation")


async def run_concurrently(
    factories: Sequence[Callable[[], Awaitable[T]]],
    concurrency: Optional[int] = None
) -> List[Union[T, BaseException]]:
    """
    Run coroutine factories concurrently with a cap on in-flight calls.

    Result slot i always belongs to factories[i], whatever the completion order.
    A raised exception is returned in its slot instead of cancelling siblings.
    """
    semaphore = asyncio.Semaphore(concurrency or settings.generation_concurrency)

    async def _run(factory: Callable[[], Awaitable[T]]) -> T:
        async with semaphore:
            return await factory()

    return await asyncio.gather(*(_run(factory) for factory in factories), return_exceptions=True)


def as_result(outcome) -> GenerationResult:
    """Normalise a fan-out slot (result or exception) into a GenerationResult."""
    if isinstance(outcome, GenerationResult):
        return outcome
    if isinstance(outcome, BaseException):
        return GenerationResult.fail(str(outcome) or type(outcome).__name__)
    return GenerationResult.ok(outcome)


async def generate_image(
    services: Services,
    prompt: str,
    aspect_ratio: str = "16:9",
    enhance_prompt: bool = False
) -> GenerationResult:
    """
    Generate one image with the schema-based image service.

    Returns:
        ok(gs:// URI), or fail(message) where a content-safety rejection carries
        the translated user-facing message
    """
    try:
        response = await services.image.generate(
            prompt, aspect_ratio=aspect_ratio, enhance_prompt=enhance_prompt
        )
    except Exception as e:
        logger.error(
            f"Image generation failed: {str(e)}",
            extra={"aspect_ratio": aspect_ratio, "error": str(e), "error_type": type(e).__name__}
        )
        return GenerationResult.fail(str(e) or type(e).__name__)

    if not response.predictions:
        return GenerationResult.fail("Image service returned no predictions")

    prediction = response.predictions[0]
    if prediction.rai_filtered_reason:
        message = translate(prediction.rai_filtered_reason)
        logger.warning(
            "Image filtered by content safety",
            extra={"reason": prediction.rai_filtered_reason, "user_message": message}
        )
        return GenerationResult.fail(message)
    if not prediction.gcs_uri:
        return GenerationResult.fail("Image service returned no image")
    return GenerationResult.ok(prediction.gcs_uri)
