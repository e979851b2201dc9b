"""
Helpers for Replicate prediction outputs.

Replicate returns a FileOutput, a URL string, or a list of either. These helpers
turn that into bytes and classify Replicate failures into pipeline errors.
"""

import asyncio
from typing import Any, Dict, Optional

import httpx
from replicate.exceptions import ModelError, ReplicateError

from shared.errors import GenerationError, RateLimitError, RetryableError
from shared.logging import get_logger

logger = get_logger("replicate")

DOWNLOAD_TIMEOUT_SECONDS = 120.0


def output_url(output: Any) -> str:
    """Extract the first output URL from a Replicate run/prediction output."""
    if isinstance(output, list):
        output = output[0] if output else None
    if not output:
        raise GenerationError("No output returned from Replicate")

    # FileOutput objects have a .url property
    url = output.url if hasattr(output, "url") else str(output)
    if not isinstance(url, str):
        url = str(url)
    if not url:
        raise GenerationError("No output URL returned from Replicate")
    return url


async def download_output(output: Any) -> bytes:
    """Download the bytes behind a Replicate output."""
    url = output_url(output)
    try:
        async with httpx.AsyncClient(timeout=DOWNLOAD_TIMEOUT_SECONDS) as http_client:
            response = await http_client.get(url)
            response.raise_for_status()
            return response.content
    except httpx.HTTPStatusError as e:
        if e.response.status_code >= 500:
            raise RetryableError(f"Server error downloading output: {str(e)}") from e
        raise GenerationError(f"Client error downloading output: {str(e)}") from e
    except httpx.RequestError as e:
        raise RetryableError(f"Network error downloading output: {str(e)}") from e


async def run_model(client: Any, model: str, input_data: Dict[str, Any], timeout: float) -> Any:
    """
    Run a Replicate model to completion in a worker thread.

    Raises:
        ModelError: The prediction failed (the caller decides whether it was moderated)
        RateLimitError / RetryableError / GenerationError: transport and API failures
    """
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(client.run, model, input=input_data),
            timeout=timeout
        )
    except ModelError:
        raise
    except asyncio.TimeoutError as e:
        raise RetryableError(f"Timeout running {model} after {timeout:.0f}s") from e
    except ReplicateError as e:
        raise classify_api_error(e, model) from e


def classify_api_error(error: ReplicateError, model: str) -> Exception:
    """Map a Replicate API error to a pipeline error."""
    status = getattr(error, "status", None)
    if status == 429:
        return RateLimitError(f"Rate limit exceeded for {model}", retry_after=None)
    if status is not None and status >= 500:
        return RetryableError(f"Server error from {model}: {str(error)}")
    return GenerationError(f"Replicate error from {model}: {str(error)}")


def prediction_error(error: ModelError) -> str:
    """Failure text of a failed prediction."""
    prediction: Optional[Any] = getattr(error, "prediction", None)
    detail = getattr(prediction, "error", None) if prediction is not None else None
    return str(detail or error)
