"""
Request bodies for the HTTP surface.

Bodies use the same camelCase wire format as the scenario models.
"""

from typing import List, Optional, Union

from pydantic import Field

from shared.models import Entity, ImagePrompt, Language, ModelConfig, Scenario, Scene
from shared.models.scenario import CamelModel


class CreateScenarioRequest(CamelModel):
    name: str = ""
    pitch: str = Field(min_length=1)
    num_scenes: int = Field(default=4, ge=1)
    style: str = ""
    aspect_ratio: str = "16:9"
    duration_seconds: int = Field(default=8, ge=1)
    language: Language
    text_model_config: Optional[ModelConfig] = Field(default=None, alias="modelConfig")


class StoryboardRequest(CamelModel):
    scenario: Scenario
    num_scenes: int = Field(default=4, ge=1)
    style: Optional[str] = None
    language: Optional[Language] = None
    use_references: Optional[bool] = None
    text_model_config: Optional[ModelConfig] = Field(default=None, alias="modelConfig")


class VideosRequest(CamelModel):
    scenes: List[Scene]
    scenario: Scenario
    language: Optional[Language] = None
    aspect_ratio: Optional[str] = None
    model: Optional[str] = None
    generate_audio: Optional[bool] = True
    duration_seconds: Optional[int] = None


class RegenerateImageRequest(CamelModel):
    prompt: Union[str, ImagePrompt]
    aspect_ratio: str = "16:9"


class RegenerateCharacterImageRequest(CamelModel):
    prompt: str = Field(min_length=1)


class SceneEditRequest(CamelModel):
    image_gcs_uri: str
    instruction: str = Field(min_length=1)


class CharacterFromImageRequest(CamelModel):
    scenario: str
    character_name: str
    description: str
    reference_image_uri: str
    all_characters: List[Entity] = Field(default_factory=list)
    text_model_config: Optional[ModelConfig] = Field(default=None, alias="modelConfig")


class CharacterFromTextRequest(CamelModel):
    scenario: str
    old_name: str
    new_name: str
    new_description: str
    style: str = ""
    text_model_config: Optional[ModelConfig] = Field(default=None, alias="modelConfig")


class SettingRequest(CamelModel):
    scenario: str
    old_name: str
    new_name: str
    new_description: str
    text_model_config: Optional[ModelConfig] = Field(default=None, alias="modelConfig")


class MusicRequest(CamelModel):
    prompt: str = Field(min_length=1)


class VoiceoverRequest(CamelModel):
    text: str = Field(min_length=1)
    language: Language
    voice: Optional[str] = None


class VoiceoversRequest(CamelModel):
    scenes: List[Scene]
    language: Language
    voice: Optional[str] = None
