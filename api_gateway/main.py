"""
FastAPI application.

Mounts the pipeline routers and maps pipeline errors to HTTP responses.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from api_gateway.routes import audio, images, regeneration, scenarios, storyboard, videos
from shared.errors import PipelineError, ValidationError
from shared.logging import get_logger

logger = get_logger(__name__)

app = FastAPI(title="Storyboard Generation API", version="0.1.0")

app.include_router(scenarios.router, prefix="/api/v1", tags=["scenarios"])
app.include_router(storyboard.router, prefix="/api/v1", tags=["storyboard"])
app.include_router(videos.router, prefix="/api/v1", tags=["videos"])
app.include_router(images.router, prefix="/api/v1", tags=["images"])
app.include_router(regeneration.router, prefix="/api/v1", tags=["regeneration"])
app.include_router(audio.router, prefix="/api/v1", tags=["audio"])


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.warning(f"Invalid request: {exc.message}", extra={"path": request.url.path})
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    logger.error(
        f"Pipeline error: {exc.message}",
        extra={"path": request.url.path, "error_type": type(exc).__name__}
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": exc.message, "error_type": type(exc).__name__}
    )


@app.get("/health")
async def health():
    return {"status": "ok"}
