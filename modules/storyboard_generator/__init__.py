"""
Storyboard Generator module.

Generates the scenes of a scenario and a first-frame image for each scene,
conditioned on the reference images of the entities the scene mentions.
"""

from .generator import generate_storyboard, generate_scene_image
from .reference_resolver import resolve_references

__all__ = ["generate_storyboard", "generate_scene_image", "resolve_references"]
