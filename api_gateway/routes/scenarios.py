"""
Scenario endpoint.

Turns a pitch into a full scenario with entity images.
"""

from fastapi import APIRouter, Depends, status

from api_gateway.dependencies import get_services
from api_gateway.schemas import CreateScenarioRequest
from modules.scenario_generator import generate_scenario
from shared.logging import get_logger
from shared.services import Services

logger = get_logger(__name__)

router = APIRouter()


@router.post("/scenarios", status_code=status.HTTP_201_CREATED)
async def create_scenario(
    request: CreateScenarioRequest,
    services: Services = Depends(get_services)
):
    """
    Generate a scenario from a pitch.

    Returns:
        Scenario in camelCase wire format
    """
    logger.info(
        "Scenario requested",
        extra={"num_scenes": request.num_scenes, "language": request.language.code}
    )
    scenario = await generate_scenario(
        name=request.name,
        pitch=request.pitch,
        num_scenes=request.num_scenes,
        style=request.style,
        aspect_ratio=request.aspect_ratio,
        duration_seconds=request.duration_seconds,
        language=request.language,
        services=services,
        model_config=request.text_model_config
    )
    return scenario.to_wire()
