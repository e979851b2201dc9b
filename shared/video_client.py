"""
Video generation client.

Replicate predictions used as long-running operations: `submit` creates a
prediction and returns its id, `poll` reports its status. When a prediction
succeeds the clip is copied into object storage and reported by gs:// URI.
"""

import asyncio
from typing import Any, Dict, Optional
from uuid import uuid4

import replicate
from replicate.exceptions import ReplicateError

from modules.content_safety import is_content_filtered
from shared.config import settings
from shared.logging import get_logger
from shared.replicate_output import classify_api_error, download_output
from shared.retry import SUBMISSION_MAX_RETRIES, with_retry
from shared.services import ObjectStorage, VideoOperationStatus

logger = get_logger("video_client")

TERMINAL_STATUSES = ("succeeded", "failed", "canceled")


class ReplicateVideoClient:
    """VideoGenerator backed by Replicate image-to-video models."""

    def __init__(self, storage: ObjectStorage, client: Optional[Any] = None):
        self.storage = storage
        self.client = client or replicate.Client(api_token=settings.replicate_api_token)

    async def submit(
        self,
        prompt: str,
        image_uri: str,
        aspect_ratio: str,
        model: str,
        generate_audio: bool,
        duration_seconds: int
    ) -> str:
        """
        Start a video generation job conditioned on a first-frame image.

        Returns:
            Prediction id, the handle passed to `poll`
        """
        image_url = await self.storage.get_signed_url(image_uri)
        input_data: Dict[str, Any] = {
            "prompt": prompt,
            "image": image_url,
            "aspect_ratio": aspect_ratio,
            "duration": duration_seconds,
            "generate_audio": generate_audio,
        }

        async def _create():
            try:
                return await asyncio.to_thread(
                    self.client.predictions.create,
                    model=model,
                    input=input_data
                )
            except ReplicateError as e:
                raise classify_api_error(e, model) from e

        prediction = await with_retry(
            _create,
            max_retries=SUBMISSION_MAX_RETRIES,
            base_delay=1.0,
            name="submit_video"
        )
        logger.info(
            f"Submitted video job {prediction.id}",
            extra={"model": model, "prediction_id": prediction.id, "aspect_ratio": aspect_ratio}
        )
        return prediction.id

    async def poll(self, operation: str, model: str) -> VideoOperationStatus:
        """Fetch the current status of a submitted job."""
        try:
            prediction = await asyncio.to_thread(self.client.predictions.get, operation)
        except ReplicateError as e:
            raise classify_api_error(e, model) from e

        status = prediction.status
        if status not in TERMINAL_STATUSES:
            return VideoOperationStatus(done=False)

        if status == "succeeded":
            video_bytes = await download_output(prediction.output)
            gcs_uri = await self.storage.upload(
                video_bytes, f"videos/video-{uuid4()}.mp4", content_type="video/mp4"
            )
            return VideoOperationStatus(done=True, videos=[gcs_uri])

        error = str(prediction.error or f"Prediction {status}")
        if is_content_filtered(error):
            return VideoOperationStatus(done=True, rai_media_filtered_reasons=[error])
        return VideoOperationStatus(done=True, error=error)
