"""
Regeneration result models.
"""

from pydantic import BaseModel, ConfigDict, Field


class CharacterUpdate(BaseModel):
    name: str
    description: str


class CharacterScenarioUpdate(BaseModel):
    """Scenario text and one character description rewritten to match an image."""

    model_config = ConfigDict(populate_by_name=True)

    updated_scenario: str = Field(alias="updatedScenario")
    updated_character: CharacterUpdate = Field(alias="updatedCharacter")


class ScenarioUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    updated_scenario: str = Field(alias="updatedScenario")


class CharacterRegeneration(BaseModel):
    """New character image plus the scenario rewritten around the new character."""

    model_config = ConfigDict(populate_by_name=True)

    new_scenario: str = Field(alias="newScenario")
    new_image_gcs_uri: str = Field(alias="newImageGcsUri")
