"""
Music generation.
"""

from uuid import uuid4

from shared.logging import get_logger
from shared.models.result import GenerationResult
from shared.services import Services

logger = get_logger("audio_generator")


async def generate_music(prompt: str, services: Services) -> GenerationResult:
    """
    Generate a music track from an English brief and store it as MP3.

    Returns:
        ok(gs:// URI) or fail(message)
    """
    if services.music is None:
        return GenerationResult.fail("Music generation is not configured")

    try:
        audio = await services.music.generate(prompt)
        uri = await services.storage.upload(audio, f"audio/music-{uuid4()}.mp3", content_type="audio/mpeg")
    except Exception as e:
        logger.error(f"Music generation failed: {str(e)}", extra={"error_type": type(e).__name__})
        return GenerationResult.fail(f"Failed to generate music: {str(e)}")

    logger.info("Generated music", extra={"music_uri": uri, "bytes": len(audio)})
    return GenerationResult.ok(uri)
