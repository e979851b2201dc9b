"""
Configuration management.

Centralized environment variable management and validation.
"""

from typing import Literal, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from shared.errors import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allow case-insensitive env var matching
        extra="ignore"
    )

    # API keys
    openai_api_key: str
    replicate_api_token: str

    # Google Cloud Storage
    gcp_project_id: str
    gcs_bucket: str
    # GOOGLE_APPLICATION_CREDENTIALS: Optional path to a service account JSON file.
    # If not set, application default credentials are used.
    google_application_credentials: Optional[str] = None
    signed_url_expiration_seconds: int = 3600

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    # LOG_DIR: Directory of the rotating app.log; empty disables file logging
    log_dir: Optional[str] = "logs"

    # Text model (scenario, storyboard and regeneration prompts)
    text_model: str = "gpt-4o"

    # Image models
    # IMAGE_MODEL: text-to-image model used for entity images and text-only scene images
    # REFERENCE_IMAGE_MODEL: multimodal model accepting reference images, used for
    # scene images that must keep characters/settings/props consistent
    image_model: str = "google/imagen-4"
    reference_image_model: str = "google/nano-banana"

    # USE_REFERENCE_IMAGES: Enable/disable reference-image conditioning for scene images.
    # Set to false to always use the fully inlined text prompt.
    use_reference_images: bool = True

    # Video model
    video_model: str = "google/veo-3"
    video_poll_interval_seconds: float = 2.0
    video_poll_timeout_seconds: float = 300.0
    default_video_duration_seconds: int = 8

    # Audio models
    music_model: str = "google/lyria-2"
    tts_model: str = "gpt-4o-mini-tts"
    tts_voice: str = "onyx"
    tts_fallback_voice: str = "alloy"

    # Maximum in-flight generation calls per fan-out
    generation_concurrency: int = 8

    @field_validator("openai_api_key")
    @classmethod
    def validate_openai_api_key(cls, v: str) -> str:
        """Validate OpenAI API key format."""
        if not v:
            raise ConfigError("OPENAI_API_KEY is required")
        if not v.startswith("sk-"):
            raise ConfigError("OPENAI_API_KEY must start with 'sk-'")
        if len(v) < 20:
            raise ConfigError("OPENAI_API_KEY appears to be invalid")
        return v

    @field_validator("replicate_api_token")
    @classmethod
    def validate_replicate_api_token(cls, v: str) -> str:
        """Validate Replicate API token format."""
        if not v:
            raise ConfigError("REPLICATE_API_TOKEN is required")
        if not v.startswith("r8_"):
            raise ConfigError("REPLICATE_API_TOKEN must start with 'r8_'")
        if len(v) < 20:
            raise ConfigError("REPLICATE_API_TOKEN appears to be invalid")
        return v

    @field_validator("gcs_bucket")
    @classmethod
    def validate_gcs_bucket(cls, v: str) -> str:
        """Validate bucket name (no scheme, no path)."""
        if not v:
            raise ConfigError("GCS_BUCKET is required")
        if v.startswith("gs://") or "/" in v:
            raise ConfigError("GCS_BUCKET must be a bare bucket name, not a URI")
        return v

    @field_validator("video_poll_interval_seconds", "video_poll_timeout_seconds")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Poll settings must be positive."""
        if v <= 0:
            raise ConfigError("Video poll interval and timeout must be positive")
        return v

    @field_validator("generation_concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ConfigError("GENERATION_CONCURRENCY must be at least 1")
        return v

    @property
    def bucket_uri(self) -> str:
        """gs:// prefix for objects written by the pipeline."""
        return f"gs://{self.gcs_bucket}"


# Singleton instance
try:
    settings = Settings()
except Exception as e:
    # Re-raise as ConfigError for consistency
    if isinstance(e, ConfigError):
        raise
    raise ConfigError(f"Failed to load configuration: {str(e)}") from e
