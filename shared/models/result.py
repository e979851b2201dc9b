"""
Generation result model.

Unit-level operations (one entity image, one scene image, one video) return a
GenerationResult instead of raising, so one failure never aborts its siblings.
"""

from typing import Any, Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")


class GenerationResult(BaseModel, Generic[T]):
    """Tagged union: ``{success: true, value}`` or ``{success: false, errorMessage}``."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    value: Optional[T] = None
    error_message: Optional[str] = Field(default=None, alias="errorMessage")

    @model_validator(mode="after")
    def check_variant(self) -> "GenerationResult":
        if self.success and self.error_message is not None:
            raise ValueError("A successful result cannot carry an error message")
        if not self.success and not self.error_message:
            raise ValueError("A failed result requires a non-empty error message")
        return self

    @classmethod
    def ok(cls, value: Any) -> "GenerationResult":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error_message: str) -> "GenerationResult":
        return cls(success=False, error_message=error_message or "Unknown error")
