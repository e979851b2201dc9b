"""
Prompt and output schema for storyboard generation.

The schema is sent as a strict structured-output schema: every object lists all
of its properties as required and allows nothing else, so the model cannot drop
structure the pipeline relies on.
"""

from typing import Any, Dict, List

from shared.models.scenario import Entity, Language, Scenario


def _object(properties: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


def _string(description: str = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "string"}
    if description:
        schema["description"] = description
    return schema


def _array(items: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "array", "items": items}


ENTITY_REF_SCHEMA = _object({"name": _string()})

IMAGE_PROMPT_SCHEMA = _object({
    "Style": _string("Visual language of the project"),
    "Composition": _object({
        "shot_type": _string("e.g. cinematic close-up, wide establishing shot"),
        "lighting": _string("e.g. high-contrast, soft natural light"),
        "overall_mood": _string(),
    }),
    "Subject": _array(ENTITY_REF_SCHEMA),
    "Prop": _array(ENTITY_REF_SCHEMA),
    "Context": _array(ENTITY_REF_SCHEMA),
    "Scene": _string("What is visible in the first frame"),
})

VIDEO_PROMPT_SCHEMA = _object({
    "Action": _string("Movement of characters and objects"),
    "Camera_Motion": _string(),
    "Ambiance_Audio": _string("Ambient sound, no music"),
    "Dialogue": _array(_object({
        "name": _string("Character name"),
        "speaker": _string("Physical description of the speaker, never the name"),
        "line": _string(),
    })),
})

SCENE_SCHEMA = _object({
    "imagePrompt": IMAGE_PROMPT_SCHEMA,
    "videoPrompt": VIDEO_PROMPT_SCHEMA,
    "description": _string(),
    "voiceover": _string(),
    "charactersPresent": _array(_string()),
})

STORYBOARD_SCHEMA = _object({"scenes": _array(SCENE_SCHEMA)})


def _entity_lines(entities: List[Entity]) -> str:
    return "\n".join(f"{entity.name}: {entity.description}" for entity in entities)


def build_scenes_prompt(scenario: Scenario, num_scenes: int, style: str, language: Language) -> str:
    """Build the prompt asking for exactly num_scenes storyboard scenes."""
    return f"""You are creating the storyboard of a short movie. The scenario below is written in {scenario.language.name}.

<scenario>
{scenario.scenario}
</scenario>

<characters>
{_entity_lines(scenario.characters)}
</characters>

<settings>
{_entity_lines(scenario.settings)}
</settings>

<props>
{_entity_lines(scenario.props)}
</props>

<music>
{scenario.music}
</music>

<mood>
{scenario.mood}
</mood>

Generate exactly {num_scenes} scenes that tell the story in order. For each scene provide:
1. imagePrompt: the first frame of the scene in a {style} style. Reference characters in Subject, props in Prop and settings in Context using their exact names from the lists above. No children.
2. videoPrompt: the motion in the scene, the camera movement, the ambient sound and any dialogue. In Dialogue, identify the speaker by physical description, never by name. Dialogue lines are in {language.name}.
3. description: what happens, in {language.name}. Character names may be used.
4. voiceover: one short narrator sentence in {language.name}, six seconds at most.
5. charactersPresent: names of the characters visible in the scene.

The scenes, viewed in sequence, must tell a coherent story with consistent characters and settings.
"""
