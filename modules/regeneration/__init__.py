"""
Regeneration Actions module.

Targeted re-generation of a single character/setting image and
consistency-preserving rewrites of the scenario text.
"""

from .scenario_rewriter import (
    regenerate_character_and_scenario,
    regenerate_scenario_from_setting,
    regenerate_character_and_scenario_from_text,
)
from .image_editor import conversational_edit, regenerate_image, regenerate_character_image

__all__ = [
    "regenerate_character_and_scenario",
    "regenerate_scenario_from_setting",
    "regenerate_character_and_scenario_from_text",
    "conversational_edit",
    "regenerate_image",
    "regenerate_character_image",
]
