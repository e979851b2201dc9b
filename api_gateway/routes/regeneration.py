"""
Scenario regeneration endpoints.

Rewrite the scenario text after a character or setting was changed.
"""

from fastapi import APIRouter, Depends

from api_gateway.dependencies import get_services
from api_gateway.schemas import CharacterFromImageRequest, CharacterFromTextRequest, SettingRequest
from modules.regeneration import (
    regenerate_character_and_scenario,
    regenerate_character_and_scenario_from_text,
    regenerate_scenario_from_setting,
)
from shared.services import Services

router = APIRouter()


@router.post("/regenerate/character")
async def regenerate_from_character_image(
    request: CharacterFromImageRequest,
    services: Services = Depends(get_services)
):
    """Re-describe a character from its new image and rewrite the scenario."""
    update = await regenerate_character_and_scenario(
        scenario_text=request.scenario,
        character_name=request.character_name,
        description=request.description,
        reference_image_uri=request.reference_image_uri,
        all_characters=request.all_characters,
        services=services,
        model_config=request.text_model_config
    )
    return update.model_dump(by_alias=True)


@router.post("/regenerate/character/text")
async def regenerate_from_character_text(
    request: CharacterFromTextRequest,
    services: Services = Depends(get_services)
):
    """Generate a new character image from text and rewrite the scenario."""
    regeneration = await regenerate_character_and_scenario_from_text(
        scenario_text=request.scenario,
        old_name=request.old_name,
        new_name=request.new_name,
        new_description=request.new_description,
        style=request.style,
        services=services,
        model_config=request.text_model_config
    )
    return regeneration.model_dump(by_alias=True)


@router.post("/regenerate/setting")
async def regenerate_from_setting(
    request: SettingRequest,
    services: Services = Depends(get_services)
):
    """Rewrite the scenario after a setting was renamed or redescribed."""
    update = await regenerate_scenario_from_setting(
        scenario_text=request.scenario,
        old_name=request.old_name,
        new_name=request.new_name,
        new_description=request.new_description,
        services=services,
        model_config=request.text_model_config
    )
    return update.model_dump(by_alias=True)
