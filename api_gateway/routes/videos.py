"""
Video endpoint.

Renders scene clips concurrently. The response carries one result per
requested scene, in request order.
"""

from fastapi import APIRouter, Depends

from api_gateway.dependencies import get_services
from api_gateway.schemas import VideosRequest
from modules.video_generator import generate_videos
from shared.logging import get_logger
from shared.services import Services

logger = get_logger(__name__)

router = APIRouter()


@router.post("/videos")
async def create_videos(
    request: VideosRequest,
    services: Services = Depends(get_services)
):
    """
    Generate one video per scene.

    Returns:
        {"results": [{"success", "value", "errorMessage"}, ...]}
    """
    scenario = request.scenario
    results = await generate_videos(
        scenes=request.scenes,
        scenario=scenario,
        language=request.language or scenario.language,
        aspect_ratio=request.aspect_ratio or scenario.aspect_ratio,
        services=services,
        model=request.model,
        generate_audio=request.generate_audio,
        duration_seconds=request.duration_seconds
    )
    succeeded = sum(1 for result in results if result.success)
    logger.info("Videos generated", extra={"scenes": len(results), "succeeded": succeeded})
    return {"results": [result.model_dump(mode="json", by_alias=True) for result in results]}
