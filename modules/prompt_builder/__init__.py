"""
Prompt Builder module.

Deterministic serialisation of structured prompts into the YAML blocks sent to
image and video models.
"""

from .builder import (
    build_image_prompt,
    build_video_prompt,
    build_entity_image_prompt,
    SHOT_TYPES,
)

__all__ = [
    "build_image_prompt",
    "build_video_prompt",
    "build_entity_image_prompt",
    "SHOT_TYPES",
]
