"""
Data models for the storyboard generation pipeline.

This module exports all Pydantic models used across pipeline modules.
"""

from .scenario import (
    GENRES,
    MOODS,
    EntityKind,
    Language,
    Entity,
    Composition,
    EntityRef,
    ImagePrompt,
    DialogueLine,
    VideoPrompt,
    Scene,
    Scenario,
    ModelConfig,
)
from .result import GenerationResult
from .regeneration import (
    CharacterUpdate,
    CharacterScenarioUpdate,
    ScenarioUpdate,
    CharacterRegeneration,
)

__all__ = [
    # Enumerations
    "GENRES",
    "MOODS",
    "EntityKind",
    # Scenario models
    "Language",
    "Entity",
    "Composition",
    "EntityRef",
    "ImagePrompt",
    "DialogueLine",
    "VideoPrompt",
    "Scene",
    "Scenario",
    "ModelConfig",
    # Results
    "GenerationResult",
    # Regeneration results
    "CharacterUpdate",
    "CharacterScenarioUpdate",
    "ScenarioUpdate",
    "CharacterRegeneration",
]
