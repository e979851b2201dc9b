"""
Voiceover generation.

Narration for each scene via text-to-speech. The configured voice is tried
first, then the fallback voice; per-scene failures are isolated.
"""

from typing import List, Optional
from uuid import uuid4

from shared.config import settings
from shared.errors import RetryableError
from shared.generation import as_result, run_concurrently
from shared.logging import get_logger
from shared.models.result import GenerationResult
from shared.models.scenario import Language, Scene
from shared.retry import LIGHT_MAX_RETRIES, with_retry
from shared.services import Services

logger = get_logger("audio_generator")


async def _synthesize(services: Services, text: str, language: Language, voice: str) -> bytes:
    return await with_retry(
        lambda: services.speech.synthesize(text, language, voice),
        max_retries=LIGHT_MAX_RETRIES,
        base_delay=1.0,
        retryable_exceptions=(RetryableError,),
        name="synthesize_speech"
    )


async def generate_voiceover(
    text: str,
    language: Language,
    services: Services,
    voice: Optional[str] = None
) -> GenerationResult:
    """
    Synthesize one voiceover and store it as MP3.

    Returns:
        ok(gs:// URI) or fail(message)
    """
    if services.speech is None:
        return GenerationResult.fail("Speech synthesis is not configured")

    voices = [voice or settings.tts_voice]
    if settings.tts_fallback_voice not in voices:
        voices.append(settings.tts_fallback_voice)

    audio = None
    last_error: Optional[Exception] = None
    for candidate in voices:
        try:
            audio = await _synthesize(services, text, language, candidate)
            break
        except Exception as e:
            last_error = e
            logger.warning(
                f"Voice {candidate!r} failed for {language.code}",
                extra={"voice": candidate, "language": language.code, "error": str(e)}
            )

    if audio is None:
        return GenerationResult.fail(f"No voices available for language {language.code}: {last_error}")

    try:
        uri = await services.storage.upload(audio, f"audio/audio-{uuid4()}.mp3", content_type="audio/mpeg")
    except Exception as e:
        logger.error(f"Failed to store voiceover: {str(e)}")
        return GenerationResult.fail(f"Failed to store voiceover: {str(e)}")

    return GenerationResult.ok(uri)


async def generate_voiceovers(
    scenes: List[Scene],
    language: Language,
    services: Services,
    voice: Optional[str] = None
) -> List[Scene]:
    """
    Generate the voiceover of every scene concurrently.

    Returns copies of the scenes, in input order, with voiceover_audio_uri set
    where synthesis succeeded. Scenes with an empty voiceover are left as is.
    """
    indexes = [index for index, scene in enumerate(scenes) if scene.voiceover.strip()]
    outcomes = await run_concurrently([
        (lambda scene=scenes[index]: generate_voiceover(scene.voiceover, language, services, voice))
        for index in indexes
    ])

    updated = [scene.model_copy() for scene in scenes]
    for index, outcome in zip(indexes, outcomes):
        result = as_result(outcome)
        if result.success:
            updated[index] = scenes[index].model_copy(update={"voiceover_audio_uri": result.value})
        else:
            logger.warning(
                f"Scene {index} voiceover failed: {result.error_message}",
                extra={"scene_index": index}
            )

    logger.info(
        "Generated voiceovers",
        extra={"scenes": len(scenes), "succeeded": sum(1 for scene in updated if scene.voiceover_audio_uri)}
    )
    return updated
