"""
Custom exception hierarchy.

All pipeline errors derive from PipelineError so callers can catch one base type.
"""

from typing import Optional


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(self, message: str, scenario_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.scenario_id = scenario_id


class ConfigError(PipelineError):
    """Invalid or missing configuration."""
    pass


class ValidationError(PipelineError):
    """Invalid input data."""
    pass


class GenerationError(PipelineError):
    """A generative model call failed."""
    pass


class ParseError(GenerationError):
    """Model output could not be parsed or did not match the expected shape."""
    pass


class RetryableError(PipelineError):
    """Transient failure (network, 5xx) that may succeed on retry."""
    pass


class RateLimitError(RetryableError):
    """Provider rate limit hit."""

    def __init__(
        self,
        message: str,
        retry_after: Optional[int] = None,
        scenario_id: Optional[str] = None
    ):
        super().__init__(message, scenario_id=scenario_id)
        self.retry_after = retry_after


class ContentSafetyError(GenerationError):
    """Provider rejected the request or result for content-safety reasons."""

    def __init__(
        self,
        message: str,
        reason: Optional[str] = None,
        scenario_id: Optional[str] = None
    ):
        super().__init__(message, scenario_id=scenario_id)
        self.reason = reason


class GenerationTimeoutError(GenerationError):
    """Waiting for a long-running generation exceeded its ceiling."""
    pass


class StorageError(PipelineError):
    """Object storage operation failed."""
    pass
