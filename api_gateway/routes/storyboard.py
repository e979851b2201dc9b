"""
Storyboard endpoint.
"""

from fastapi import APIRouter, Depends

from api_gateway.dependencies import get_services
from api_gateway.schemas import StoryboardRequest
from modules.storyboard_generator import generate_storyboard
from shared.logging import get_logger
from shared.services import Services

logger = get_logger(__name__)

router = APIRouter()


@router.post("/storyboard")
async def create_storyboard(
    request: StoryboardRequest,
    services: Services = Depends(get_services)
):
    """Generate scenes and first-frame images for an existing scenario."""
    scenario = request.scenario
    updated = await generate_storyboard(
        scenario=scenario,
        num_scenes=request.num_scenes,
        style=request.style if request.style is not None else scenario.style,
        language=request.language or scenario.language,
        services=services,
        model_config=request.text_model_config,
        use_references=request.use_references
    )
    return updated.to_wire()
