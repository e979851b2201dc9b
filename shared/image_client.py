"""
Image generation clients.

Two adapters over Replicate:
- ReplicateImageClient: text-to-image for entity images and text-only scene images
- ReplicateReferenceImageClient: multimodal model conditioned on reference images,
  used to keep characters, settings and props consistent across scenes

Generated images are copied into object storage so the rest of the pipeline only
ever sees gs:// URIs. Moderation rejections are reported in the response rather
than raised, so the retry loop does not resubmit filtered prompts.
"""

from typing import Any, Dict, List, Optional
from uuid import uuid4

import replicate
from replicate.exceptions import ModelError

from modules.content_safety import is_content_filtered, translate
from shared.config import settings
from shared.logging import get_logger
from shared.models.result import GenerationResult
from shared.replicate_output import download_output, prediction_error, run_model
from shared.retry import SUBMISSION_MAX_RETRIES, with_retry
from shared.services import (
    ImageGenerationResponse,
    ImagePart,
    ImagePrediction,
    ObjectStorage,
    PromptPart,
    TextPart,
)

logger = get_logger("image_client")

IMAGE_TIMEOUT_SECONDS = 120.0


class ReplicateImageClient:
    """ImageGenerator backed by a Replicate text-to-image model."""

    def __init__(
        self,
        storage: ObjectStorage,
        client: Optional[Any] = None,
        model: Optional[str] = None
    ):
        self.storage = storage
        self.client = client or replicate.Client(api_token=settings.replicate_api_token)
        self.model = model or settings.image_model

    def _input(self, prompt: str, aspect_ratio: str, enhance_prompt: bool) -> Dict[str, Any]:
        input_data: Dict[str, Any] = {
            "prompt": prompt,
            "aspect_ratio": aspect_ratio,
            "safety_filter_level": "block_only_high",
            "output_format": "png",
        }
        if enhance_prompt:
            input_data["enhance_prompt"] = True
        return input_data

    async def _generate_once(self, input_data: Dict[str, Any]) -> ImagePrediction:
        try:
            output = await run_model(self.client, self.model, input_data, IMAGE_TIMEOUT_SECONDS)
        except ModelError as e:
            reason = prediction_error(e)
            if is_content_filtered(reason):
                logger.warning(
                    "Image prompt filtered by content safety",
                    extra={"model": self.model, "reason": reason}
                )
                return ImagePrediction(rai_filtered_reason=reason)
            raise

        image_bytes = await download_output(output)
        gcs_uri = await self.storage.upload(
            image_bytes, f"images/image-{uuid4()}.png", content_type="image/png"
        )
        return ImagePrediction(gcs_uri=gcs_uri)

    async def generate(
        self,
        prompt: str,
        aspect_ratio: str = "16:9",
        enhance_prompt: bool = False
    ) -> ImageGenerationResponse:
        """
        Generate one image.

        Returns:
            Response with a single prediction carrying either gcs_uri or
            rai_filtered_reason
        """
        input_data = self._input(prompt, aspect_ratio, enhance_prompt)

        async def _attempt() -> ImagePrediction:
            return await self._generate_once(input_data)

        prediction = await with_retry(
            _attempt,
            max_retries=SUBMISSION_MAX_RETRIES,
            base_delay=1.0,
            name="generate_image"
        )
        logger.info(
            "Image generated" if prediction.gcs_uri else "Image filtered",
            extra={"model": self.model, "aspect_ratio": aspect_ratio, "gcs_uri": prediction.gcs_uri}
        )
        return ImageGenerationResponse(predictions=[prediction])


class ReplicateReferenceImageClient:
    """ReferenceImageGenerator backed by a Replicate multimodal image model."""

    def __init__(
        self,
        storage: ObjectStorage,
        client: Optional[Any] = None,
        model: Optional[str] = None
    ):
        self.storage = storage
        self.client = client or replicate.Client(api_token=settings.replicate_api_token)
        self.model = model or settings.reference_image_model

    async def _build_input(self, parts: List[PromptPart]) -> Dict[str, Any]:
        """
        Flatten ordered parts into a prompt and an image list.

        Each image is replaced in the text by a numbered marker so that the label
        preceding it (usually the entity name) stays attached to the right image.
        """
        lines: List[str] = []
        image_urls: List[str] = []
        for part in parts:
            if isinstance(part, TextPart):
                lines.append(part.text)
            elif isinstance(part, ImagePart):
                image_urls.append(await self.storage.get_signed_url(part.uri))
                lines.append(f"[reference image {len(image_urls)}]")
        input_data: Dict[str, Any] = {"prompt": "\n".join(lines), "output_format": "png"}
        if image_urls:
            input_data["image_input"] = image_urls
        return input_data

    async def _generate_once(self, input_data: Dict[str, Any]) -> GenerationResult:
        try:
            output = await run_model(self.client, self.model, input_data, IMAGE_TIMEOUT_SECONDS)
        except ModelError as e:
            reason = prediction_error(e)
            if is_content_filtered(reason):
                logger.warning(
                    "Reference image filtered by content safety",
                    extra={"model": self.model, "reason": reason}
                )
                return GenerationResult.fail(translate(reason))
            raise

        image_bytes = await download_output(output)
        gcs_uri = await self.storage.upload(
            image_bytes, f"images/gemini-{uuid4()}.png", content_type="image/png"
        )
        return GenerationResult.ok(gcs_uri)

    async def generate(self, parts: List[PromptPart]) -> GenerationResult:
        """
        Generate an image from interleaved text and reference-image parts.

        Never raises: failures come back as ``GenerationResult.fail``.
        """
        try:
            input_data = await self._build_input(parts)

            async def _attempt() -> GenerationResult:
                return await self._generate_once(input_data)

            result = await with_retry(
                _attempt,
                max_retries=SUBMISSION_MAX_RETRIES,
                base_delay=1.0,
                name="generate_reference_image"
            )
        except Exception as e:
            logger.error(
                f"Reference image generation failed: {str(e)}",
                extra={"model": self.model, "error": str(e)}
            )
            return GenerationResult.fail(str(e))

        if result.success:
            logger.info(
                "Reference image generated",
                extra={"model": self.model, "images": len(input_data.get("image_input", [])), "gcs_uri": result.value}
            )
        return result
