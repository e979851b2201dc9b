"""
Image processing utilities.

Pillow helpers used before user-supplied images are uploaded: compression of
reference uploads and letterboxing to the storyboard frame size.
"""

import io
from typing import Tuple
from PIL import Image
from shared.errors import ValidationError
from shared.logging import get_logger

logger = get_logger("image_processing")

# Uploaded reference images must fit inside this box
MAX_UPLOAD_SIZE: Tuple[int, int] = (1024, 1024)
UPLOAD_JPEG_QUALITY = 85

# Storyboard frame used when a user replaces a scene image
STORYBOARD_FRAME_SIZE: Tuple[int, int] = (1792, 1024)


def _open(image_bytes: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
        return image
    except Exception as e:
        raise ValidationError(f"Could not read image: {str(e)}") from e


def compress_image(
    image_bytes: bytes,
    max_size: Tuple[int, int] = MAX_UPLOAD_SIZE,
    quality: int = UPLOAD_JPEG_QUALITY
) -> bytes:
    """
    Shrink an image to fit inside max_size (never enlarging) and re-encode as JPEG.

    Args:
        image_bytes: Raw image bytes in any format Pillow reads
        max_size: Bounding box (width, height)
        quality: JPEG quality

    Returns:
        JPEG bytes

    Raises:
        ValidationError: If the bytes are not a readable image
    """
    image = _open(image_bytes)
    original_size = image.size

    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        # JPEG has no alpha; flatten onto white
        image = image.convert("RGBA")
        background = Image.new("RGB", image.size, (255, 255, 255))
        background.paste(image, mask=image.split()[3])
        image = background
    elif image.mode != "RGB":
        image = image.convert("RGB")

    # thumbnail() keeps aspect ratio and only ever shrinks
    image.thumbnail(max_size, Image.Resampling.LANCZOS)

    output = io.BytesIO()
    image.save(output, format="JPEG", quality=quality, optimize=True)
    data = output.getvalue()

    logger.debug(
        "Compressed image",
        extra={
            "original_size": f"{original_size[0]}x{original_size[1]}",
            "final_size": f"{image.size[0]}x{image.size[1]}",
            "bytes_in": len(image_bytes),
            "bytes_out": len(data)
        }
    )
    return data


def letterbox_image(
    image_bytes: bytes,
    target_size: Tuple[int, int] = STORYBOARD_FRAME_SIZE,
    background: Tuple[int, int, int] = (0, 0, 0)
) -> bytes:
    """
    Fit an image inside target_size without cropping, padding with a solid color.

    Returns PNG bytes of exactly target_size.
    """
    image = _open(image_bytes).convert("RGB")

    target_width, target_height = target_size
    scale = min(target_width / image.width, target_height / image.height)
    new_width = max(1, int(image.width * scale))
    new_height = max(1, int(image.height * scale))
    image = image.resize((new_width, new_height), Image.Resampling.LANCZOS)

    canvas = Image.new("RGB", target_size, background)
    canvas.paste(image, ((target_width - new_width) // 2, (target_height - new_height) // 2))

    output = io.BytesIO()
    canvas.save(output, format="PNG")
    return output.getvalue()
