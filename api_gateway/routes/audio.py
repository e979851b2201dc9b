"""
Audio endpoints: background music and voiceovers.
"""

from fastapi import APIRouter, Depends

from api_gateway.dependencies import get_services
from api_gateway.schemas import MusicRequest, VoiceoverRequest, VoiceoversRequest
from modules.audio_generator import generate_music, generate_voiceover, generate_voiceovers
from shared.services import Services

router = APIRouter()


@router.post("/audio/music")
async def create_music(request: MusicRequest, services: Services = Depends(get_services)):
    result = await generate_music(request.prompt, services)
    return result.model_dump(mode="json", by_alias=True)


@router.post("/audio/voiceover")
async def create_voiceover(request: VoiceoverRequest, services: Services = Depends(get_services)):
    result = await generate_voiceover(request.text, request.language, services, voice=request.voice)
    return result.model_dump(mode="json", by_alias=True)


@router.post("/audio/voiceovers")
async def create_voiceovers(request: VoiceoversRequest, services: Services = Depends(get_services)):
    """Voiceovers for a list of scenes; returns the updated scenes."""
    scenes = await generate_voiceovers(request.scenes, request.language, services, voice=request.voice)
    return {"scenes": [scene.model_dump(mode="json", by_alias=True) for scene in scenes]}
