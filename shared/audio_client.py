"""
Audio generation clients.

- OpenAISpeechClient: voiceover text-to-speech (MP3)
- ReplicateMusicClient: background music from a short English brief
"""

from typing import Any, Optional

import replicate
from openai import AsyncOpenAI
from openai import APIError, RateLimitError, APITimeoutError

from shared.config import settings
from shared.errors import GenerationError, RetryableError
from shared.logging import get_logger
from shared.models.scenario import Language
from shared.replicate_output import download_output, run_model
from shared.retry import LIGHT_MAX_RETRIES, with_retry

logger = get_logger("audio_client")

MUSIC_TIMEOUT_SECONDS = 300.0


class OpenAISpeechClient:
    """SpeechGenerator backed by OpenAI text-to-speech."""

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: Optional[str] = None):
        self.client = client or AsyncOpenAI(api_key=settings.openai_api_key)
        self.model = model or settings.tts_model

    async def synthesize(self, text: str, language: Language, voice: str) -> bytes:
        """
        Synthesize speech as MP3 bytes.

        Raises:
            RetryableError: Rate limits, timeouts and 5xx responses
            GenerationError: Any other failure (including an unknown voice)
        """
        try:
            response = await self.client.audio.speech.create(
                model=self.model,
                voice=voice,
                input=text,
                instructions=f"Speak in {language.name} ({language.code}) as a calm film narrator.",
                response_format="mp3"
            )
        except (RateLimitError, APITimeoutError) as e:
            raise RetryableError(f"Speech synthesis temporarily unavailable: {str(e)}") from e
        except APIError as e:
            status_code = getattr(e, "status_code", None)
            if status_code and status_code >= 500:
                raise RetryableError(f"Retryable speech API error: {str(e)}") from e
            raise GenerationError(f"Speech API error: {str(e)}") from e

        audio = response.content
        logger.info(
            "Synthesized speech",
            extra={"voice": voice, "language": language.code, "characters": len(text), "bytes": len(audio)}
        )
        return audio


class ReplicateMusicClient:
    """MusicGenerator backed by a Replicate text-to-music model."""

    def __init__(self, client: Optional[Any] = None, model: Optional[str] = None):
        self.client = client or replicate.Client(api_token=settings.replicate_api_token)
        self.model = model or settings.music_model

    async def generate(self, prompt: str) -> bytes:
        """Generate a music track and return its audio bytes."""

        async def _attempt() -> bytes:
            output = await run_model(self.client, self.model, {"prompt": prompt}, MUSIC_TIMEOUT_SECONDS)
            return await download_output(output)

        audio = await with_retry(
            _attempt,
            max_retries=LIGHT_MAX_RETRIES,
            base_delay=1.0,
            name="generate_music"
        )
        logger.info("Generated music", extra={"model": self.model, "bytes": len(audio)})
        return audio
