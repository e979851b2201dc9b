"""
Prompt serialisation.

Image and video models were prompted with YAML blocks in a fixed key order; the
order is part of the contract and must not change. Output is a pure function of
the input (no timestamps, no randomness, no line wrapping).
"""

from typing import Any, Dict, List

import yaml

from shared.models.scenario import EntityKind, EntityRef, ImagePrompt, VideoPrompt

SHOT_TYPES: Dict[str, str] = {
    "character": "Medium Shot",
    "setting": "Wide Shot",
    "prop": "Close Shot",
}


def _dump(data: Dict[str, Any]) -> str:
    return yaml.safe_dump(
        data,
        sort_keys=False,
        indent=2,
        width=float("inf"),
        allow_unicode=True,
        default_flow_style=False,
    )


def _refs(refs: List[EntityRef]) -> List[Dict[str, str]]:
    serialised = []
    for ref in refs:
        item = {"name": ref.name}
        if ref.description is not None:
            item["description"] = ref.description
        serialised.append(item)
    return serialised


def build_image_prompt(image_prompt: ImagePrompt, with_references: bool = False) -> str:
    """
    Serialise a scene image prompt.

    Args:
        image_prompt: Structured prompt
        with_references: True when entity images are attached as reference parts;
            Subject and Context are then left out.

    Returns:
        YAML string
    """
    ordered: Dict[str, Any] = {
        "Style": image_prompt.style,
        "Scene": image_prompt.scene,
        "Composition": {
            "shot_type": image_prompt.composition.shot_type,
            "lighting": image_prompt.composition.lighting,
            "overall_mood": image_prompt.composition.overall_mood,
        },
    }
    if not with_references:
        ordered["Subject"] = _refs(image_prompt.subject)
        ordered["Context"] = _refs(image_prompt.context)
    return _dump(ordered)


def build_video_prompt(video_prompt: VideoPrompt) -> str:
    """Serialise a scene video prompt (Action, Camera_Motion, Ambiance_Audio, Dialogue)."""
    ordered = {
        "Action": video_prompt.action,
        "Camera_Motion": video_prompt.camera_motion,
        "Ambiance_Audio": video_prompt.ambiance_audio,
        "Dialogue": [
            {"speaker": line.speaker, "line": line.line}
            for line in video_prompt.dialogue
        ],
    }
    return _dump(ordered)


def build_entity_image_prompt(style: str, kind: EntityKind, description: str) -> str:
    """Serialise the prompt for a character, setting or prop reference image."""
    return _dump({
        "style": style,
        "shot_type": SHOT_TYPES[kind],
        "description": description,
    })
