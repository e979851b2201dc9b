"""
External collaborator interfaces.

The pipeline never talks to a vendor SDK directly. Each generation step receives
a `Services` bundle built once at process start (see `build_services`) and calls
the collaborators through the protocols below, which keeps the core testable
with plain mocks.
"""

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Protocol, Union

from shared.models.result import GenerationResult
from shared.models.scenario import Language


@dataclass(frozen=True)
class TextPart:
    """Text segment of a multimodal prompt."""

    text: str


@dataclass(frozen=True)
class ImagePart:
    """Image segment of a multimodal prompt, addressed by storage URI."""

    uri: str
    mime_type: str = "image/png"


PromptPart = Union[TextPart, ImagePart]
PromptContent = Union[str, List[PromptPart]]


@dataclass
class ImagePrediction:
    """One image produced by the schema-based image service."""

    gcs_uri: Optional[str] = None
    rai_filtered_reason: Optional[str] = None


@dataclass
class ImageGenerationResponse:
    predictions: List[ImagePrediction] = field(default_factory=list)


@dataclass
class VideoOperationStatus:
    """Snapshot of a long-running video generation job."""

    done: bool
    videos: List[str] = field(default_factory=list)
    rai_media_filtered_reasons: List[str] = field(default_factory=list)
    error: Optional[str] = None


class TextGenerator(Protocol):
    async def generate(
        self,
        content: PromptContent,
        response_format: Literal["text", "json"] = "text",
        json_schema: Optional[dict] = None,
        thinking_effort: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str:
        ...


class ImageGenerator(Protocol):
    async def generate(
        self,
        prompt: str,
        aspect_ratio: str = "16:9",
        enhance_prompt: bool = False,
    ) -> ImageGenerationResponse:
        ...


class ReferenceImageGenerator(Protocol):
    async def generate(self, parts: List[PromptPart]) -> GenerationResult:
        ...


class VideoGenerator(Protocol):
    async def submit(
        self,
        prompt: str,
        image_uri: str,
        aspect_ratio: str,
        model: str,
        generate_audio: bool,
        duration_seconds: int,
    ) -> str:
        ...

    async def poll(self, operation: str, model: str) -> VideoOperationStatus:
        ...


class SpeechGenerator(Protocol):
    async def synthesize(self, text: str, language: Language, voice: str) -> bytes:
        ...


class MusicGenerator(Protocol):
    async def generate(self, prompt: str) -> bytes:
        ...


class ObjectStorage(Protocol):
    async def upload(self, data: Union[bytes, str], key: str, content_type: Optional[str] = None) -> str:
        ...

    async def download(self, uri: str) -> bytes:
        ...

    async def get_signed_url(self, uri: str, download: bool = False) -> str:
        ...

    async def get_mime_type(self, uri: str) -> str:
        ...


@dataclass
class Services:
    """Collaborator handles passed into every pipeline operation."""

    text: TextGenerator
    image: ImageGenerator
    reference_image: ReferenceImageGenerator
    video: VideoGenerator
    storage: ObjectStorage
    speech: Optional[SpeechGenerator] = None
    music: Optional[MusicGenerator] = None


def build_services() -> Services:
    """Construct the production adapters (OpenAI, Replicate, Cloud Storage)."""
    import replicate
    from openai import AsyncOpenAI

    from shared.audio_client import OpenAISpeechClient, ReplicateMusicClient
    from shared.config import settings
    from shared.image_client import ReplicateImageClient, ReplicateReferenceImageClient
    from shared.llm_client import OpenAITextClient
    from shared.storage import StorageClient
    from shared.video_client import ReplicateVideoClient

    storage = StorageClient()
    openai_client = AsyncOpenAI(api_key=settings.openai_api_key)
    replicate_client = replicate.Client(api_token=settings.replicate_api_token)

    return Services(
        text=OpenAITextClient(storage, client=openai_client),
        image=ReplicateImageClient(storage, client=replicate_client),
        reference_image=ReplicateReferenceImageClient(storage, client=replicate_client),
        video=ReplicateVideoClient(storage, client=replicate_client),
        storage=storage,
        speech=OpenAISpeechClient(client=openai_client),
        music=ReplicateMusicClient(client=replicate_client),
    )
