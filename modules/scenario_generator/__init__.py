"""
Scenario Generator module.

Turns a pitch into a Scenario (story text, cast, settings, music brief) and
generates a reference image for every character, setting and prop.
"""

from .generator import generate_scenario, generate_entity_images

__all__ = ["generate_scenario", "generate_entity_images"]
