"""
Text generation client.

OpenAI chat completions for scenario, storyboard and regeneration prompts, with
plain-text, JSON-object and JSON-schema output modes and multimodal (image)
input. Also hosts the fence-stripping JSON parser shared by the generators.
"""

import json
from typing import Any, Dict, List, Literal, Optional

from openai import AsyncOpenAI
from openai import APIError, RateLimitError, APITimeoutError

from shared.config import settings
from shared.errors import GenerationError, ParseError, RetryableError
from shared.logging import get_logger
from shared.retry import with_retry
from shared.services import ImagePart, ObjectStorage, PromptContent, TextPart

logger = get_logger("llm_client")

# Model families that accept the reasoning_effort parameter
REASONING_MODEL_PREFIXES = ("o1", "o3", "o4", "gpt-5")


def strip_code_fences(content: str) -> str:
    """Remove a surrounding markdown code block (```json ... ```), if any."""
    text = content.strip()
    if "```json" in text:
        start_idx = text.find("```json") + 7
        end_idx = text.find("```", start_idx)
        if end_idx != -1:
            return text[start_idx:end_idx].strip()
    elif text.startswith("```"):
        start_idx = text.find("\n") + 1 if "\n" in text else 3
        end_idx = text.rfind("```")
        if end_idx >= start_idx:
            return text[start_idx:end_idx].strip()
    return text


def parse_json_response(content: Optional[str]) -> Any:
    """
    Parse a model response as JSON after stripping markdown fences.

    Raises:
        ParseError: "Failed to parse AI response: <parser message>"
    """
    if not content:
        raise ParseError("Failed to parse AI response: empty response")
    try:
        return json.loads(strip_code_fences(content))
    except json.JSONDecodeError as e:
        logger.error(
            "Failed to parse AI response",
            extra={"error": str(e), "response_preview": content[:500]}
        )
        raise ParseError(f"Failed to parse AI response: {str(e)}") from e


class OpenAITextClient:
    """TextGenerator backed by OpenAI chat completions."""

    def __init__(
        self,
        storage: ObjectStorage,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
        timeout: float = 120.0
    ):
        self.storage = storage
        self.client = client or AsyncOpenAI(api_key=settings.openai_api_key)
        self.model = model or settings.text_model
        self.timeout = timeout

    async def _to_message_content(self, content: PromptContent) -> Any:
        if isinstance(content, str):
            return content

        message_parts: List[Dict[str, Any]] = []
        for part in content:
            if isinstance(part, TextPart):
                message_parts.append({"type": "text", "text": part.text})
            elif isinstance(part, ImagePart):
                # The API cannot read gs:// objects; hand it a short-lived signed URL
                url = await self.storage.get_signed_url(part.uri)
                message_parts.append({"type": "image_url", "image_url": {"url": url}})
            else:
                raise GenerationError(f"Unsupported prompt part: {type(part).__name__}")
        return message_parts

    async def generate(
        self,
        content: PromptContent,
        response_format: Literal["text", "json"] = "text",
        json_schema: Optional[dict] = None,
        thinking_effort: Optional[str] = None,
        model: Optional[str] = None
    ) -> str:
        """
        Generate text.

        Args:
            content: Prompt string or ordered text/image parts
            response_format: "json" requests a JSON object
            json_schema: Strict JSON schema for structured output (implies JSON)
            thinking_effort: Reasoning effort for reasoning models, ignored otherwise
            model: Model override

        Returns:
            Raw response text

        Raises:
            GenerationError: If the call fails (after retries for transient errors)
        """
        model = model or self.model
        message_content = await self._to_message_content(content)

        kwargs: Dict[str, Any] = {}
        if json_schema is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": "response", "schema": json_schema, "strict": True},
            }
        elif response_format == "json":
            kwargs["response_format"] = {"type": "json_object"}

        if model.startswith(REASONING_MODEL_PREFIXES):
            if thinking_effort:
                kwargs["reasoning_effort"] = thinking_effort
        else:
            kwargs["temperature"] = 0.7

        async def _call() -> str:
            return await self._complete(model, message_content, kwargs)

        return await with_retry(
            _call,
            max_retries=3,
            base_delay=2,
            retryable_exceptions=(RetryableError,),
            name="text_generate"
        )

    async def _complete(self, model: str, message_content: Any, kwargs: Dict[str, Any]) -> str:
        try:
            logger.info(
                "Calling text model",
                extra={
                    "model": model,
                    "response_format": kwargs.get("response_format", {}).get("type", "text"),
                    "multimodal": not isinstance(message_content, str)
                }
            )
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": message_content}],
                timeout=self.timeout,
                **kwargs
            )

            text = response.choices[0].message.content
            if not text:
                raise GenerationError("Empty response from text model")

            usage = getattr(response, "usage", None)
            logger.info(
                "Text model call succeeded",
                extra={
                    "model": model,
                    "input_tokens": getattr(usage, "prompt_tokens", None),
                    "output_tokens": getattr(usage, "completion_tokens", None)
                }
            )
            return text

        except GenerationError:
            raise
        except RateLimitError as e:
            logger.warning(f"Rate limit error: {str(e)}")
            raise RetryableError(f"Rate limit error: {str(e)}") from e
        except APITimeoutError as e:
            logger.warning(f"API timeout: {str(e)}")
            raise RetryableError(f"API timeout: {str(e)}") from e
        except APIError as e:
            logger.error(f"OpenAI API error: {str(e)}")
            status_code = getattr(e, "status_code", None)
            if status_code and status_code >= 500:
                raise RetryableError(f"Retryable API error: {str(e)}") from e
            raise GenerationError(f"OpenAI API error: {str(e)}") from e
        except Exception as e:
            logger.error(f"Unexpected error in text model call: {str(e)}", exc_info=True)
            raise GenerationError(f"Unexpected error: {str(e)}") from e
