"""
Scenario data models.

Defines Language, Entity, ImagePrompt, VideoPrompt, Scene and Scenario.

Field names are snake_case in Python and keep the camelCase (or, for the prompt
objects, the capitalised) names used in the JSON exchanged with the text model
and the UI. Dump with ``by_alias=True`` to get the wire shape.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


GENRES = (
    "Alternative & Punk",
    "Ambient",
    "Children's",
    "Cinematic",
    "Classical",
    "Country & Folk",
    "Dance & Electronic",
    "Hip-Hop & Rap",
    "Holiday",
    "Jazz & Blues",
    "Pop",
    "R&B & Soul",
    "Reggae",
    "Rock",
)

MOODS = (
    "Angry",
    "Bright",
    "Calm",
    "Dark",
    "Dramatic",
    "Funky",
    "Happy",
    "Inspirational",
    "Romantic",
    "Sad",
)

Genre = Literal[GENRES]
Mood = Literal[MOODS]
EntityKind = Literal["character", "setting", "prop"]


def _canonical(value, choices):
    """Map a case/whitespace variant onto its canonical enum spelling."""
    if not isinstance(value, str):
        return value
    wanted = " ".join(value.split()).lower()
    for choice in choices:
        if choice.lower() == wanted:
            return choice
    return value


class CamelModel(BaseModel):
    """Base model serialising to camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Language(CamelModel):
    """Locale descriptor used for text and speech generation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str = Field(description="Display name, e.g. 'English (United States)'")
    code: str = Field(description="BCP-47 code, e.g. 'en-US'")


class Entity(CamelModel):
    """A character, setting or prop of a scenario."""

    name: str
    description: str
    image_gcs_uri: Optional[str] = Field(
        default=None,
        description="Object storage URI of the generated reference image"
    )

    @field_validator("description", mode="before")
    @classmethod
    def join_description_lines(cls, v):
        """The text model sometimes returns the description as a list of lines."""
        if isinstance(v, list):
            return "\n".join(str(line) for line in v)
        return v


class Composition(BaseModel):
    """Shot composition of a scene image."""

    shot_type: str
    lighting: str
    overall_mood: str


class EntityRef(BaseModel):
    """Reference from a scene prompt to a scenario entity, by name."""

    name: str
    description: Optional[str] = None


class ImagePrompt(BaseModel):
    """Structured visual descriptor of a scene's first frame."""

    model_config = ConfigDict(populate_by_name=True)

    style: str = Field(alias="Style")
    scene: str = Field(alias="Scene")
    composition: Composition = Field(alias="Composition")
    subject: List[EntityRef] = Field(default_factory=list, alias="Subject")
    prop: List[EntityRef] = Field(default_factory=list, alias="Prop")
    context: List[EntityRef] = Field(default_factory=list, alias="Context")


class DialogueLine(BaseModel):
    """One spoken line; the speaker is identified by physical description."""

    speaker: str
    line: str
    name: Optional[str] = None


class VideoPrompt(BaseModel):
    """Structured motion/audio descriptor of a scene clip."""

    model_config = ConfigDict(populate_by_name=True)

    action: str = Field(alias="Action")
    camera_motion: str = Field(alias="Camera_Motion")
    ambiance_audio: str = Field(alias="Ambiance_Audio")
    dialogue: List[DialogueLine] = Field(default_factory=list, alias="Dialogue")


class Scene(CamelModel):
    """One storyboard beat."""

    image_prompt: ImagePrompt
    video_prompt: VideoPrompt
    description: str
    voiceover: str
    characters_present: List[str] = Field(default_factory=list)
    image_gcs_uri: Optional[str] = None
    video_uri: Optional[str] = None
    voiceover_audio_uri: Optional[str] = None
    error_message: Optional[str] = None


class Scenario(CamelModel):
    """Root aggregate: story text, cast, settings, props, music brief and scenes."""

    name: str = ""
    pitch: str = ""
    style: str = ""
    aspect_ratio: str = "16:9"
    duration_seconds: int = 8
    language: Language
    scenario: str
    genre: Genre
    mood: Mood
    music: str
    music_url: Optional[str] = None
    logo_overlay: Optional[str] = None
    characters: List[Entity] = Field(default_factory=list)
    settings: List[Entity] = Field(default_factory=list)
    props: List[Entity] = Field(default_factory=list)
    scenes: List[Scene] = Field(default_factory=list)

    @field_validator("genre", mode="before")
    @classmethod
    def canonical_genre(cls, v):
        return _canonical(v, GENRES)

    @field_validator("mood", mode="before")
    @classmethod
    def canonical_mood(cls, v):
        return _canonical(v, MOODS)

    @field_validator("props", mode="before")
    @classmethod
    def default_props(cls, v):
        return [] if v is None else v

    @model_validator(mode="after")
    def check_unique_names(self) -> "Scenario":
        """Entity names are the join key from scene references; they must be unique."""
        for field_name in ("characters", "settings", "props"):
            seen = set()
            for entity in getattr(self, field_name):
                if entity.name in seen:
                    raise ValueError(f"Duplicate name in {field_name}: {entity.name!r}")
                seen.add(entity.name)
        return self

    def to_wire(self) -> dict:
        """JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    def deep_copy(self) -> "Scenario":
        """Independent copy via a serialisation round trip."""
        return Scenario.model_validate_json(self.model_dump_json(by_alias=True))


class ModelConfig(BaseModel):
    """Per-request overrides for the text model."""

    text_model: Optional[str] = None
    thinking_effort: Optional[str] = None
