"""
Image endpoints.

Regenerate scene and character images, edit an image conversationally and
upload user-provided images.
"""

import asyncio
from uuid import uuid4

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from api_gateway.dependencies import get_services
from api_gateway.schemas import (
    RegenerateCharacterImageRequest,
    RegenerateImageRequest,
    SceneEditRequest,
)
from modules.regeneration import conversational_edit, regenerate_character_image, regenerate_image
from shared.errors import ValidationError
from shared.image_processing import compress_image, letterbox_image
from shared.logging import get_logger
from shared.services import Services

logger = get_logger(__name__)

router = APIRouter()

MAX_UPLOAD_BYTES = 20 * 1024 * 1024


def _result(result) -> dict:
    return result.model_dump(mode="json", by_alias=True)


@router.post("/regenerate-image")
async def regenerate_scene_image(
    request: RegenerateImageRequest,
    services: Services = Depends(get_services)
):
    """Regenerate an image from a plain or structured prompt."""
    result = await regenerate_image(request.prompt, services, aspect_ratio=request.aspect_ratio)
    return _result(result)


@router.put("/regenerate-image")
async def regenerate_character(
    request: RegenerateCharacterImageRequest,
    services: Services = Depends(get_services)
):
    """Regenerate a square character image from a text prompt."""
    result = await regenerate_character_image(request.prompt, services)
    return _result(result)


@router.post("/scene/edit")
async def edit_scene_image(
    request: SceneEditRequest,
    services: Services = Depends(get_services)
):
    """Apply a natural-language edit to an existing image."""
    result = await conversational_edit(request.image_gcs_uri, request.instruction, services)
    return _result(result)


@router.post("/images/upload", status_code=status.HTTP_201_CREATED)
async def upload_image(
    image_file: UploadFile = File(...),
    letterbox: bool = Form(False),
    services: Services = Depends(get_services)
):
    """
    Store a user image.

    By default the image is compressed to fit 1024x1024 as JPEG. With
    ``letterbox`` it is fitted onto a black 1792x1024 PNG frame instead.
    """
    data = await image_file.read()
    if not data:
        raise ValidationError("Uploaded image is empty")
    if len(data) > MAX_UPLOAD_BYTES:
        raise ValidationError("Uploaded image exceeds 20MB")

    if letterbox:
        framed = await asyncio.to_thread(letterbox_image, data)
        uri = await services.storage.upload(framed, f"images/upload-{uuid4()}.png", content_type="image/png")
    else:
        compressed = await asyncio.to_thread(compress_image, data)
        uri = await services.storage.upload(compressed, f"images/{uuid4()}.jpg", content_type="image/jpeg")

    logger.info("Image uploaded", extra={"gcs_uri": uri, "letterbox": letterbox, "bytes": len(data)})
    return {"gcsUri": uri}
