"""
Audio Generator module.

Background music from the scenario's music brief and per-scene voiceovers.
"""

from .music import generate_music
from .voiceover import generate_voiceover, generate_voiceovers

__all__ = ["generate_music", "generate_voiceover", "generate_voiceovers"]
