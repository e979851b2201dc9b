"""
Prompts and schemas for targeted regeneration.
"""

from typing import List

from shared.models.scenario import Entity

CHARACTER_SCENARIO_UPDATE_SCHEMA = {
    "type": "object",
    "properties": {
        "updatedScenario": {"type": "string"},
        "updatedCharacter": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "description": {"type": "string"},
            },
            "required": ["name", "description"],
            "additionalProperties": False,
        },
    },
    "required": ["updatedScenario", "updatedCharacter"],
    "additionalProperties": False,
}


def build_character_from_image_prompt(
    scenario_text: str,
    character_name: str,
    description: str,
    all_characters: List[Entity]
) -> str:
    character_list = "\n".join(f"- {c.name}: {c.description}" for c in all_characters)
    return f"""Look at the attached image and update the description of one character, and the scenario, so that they match what the image shows.

CURRENT SCENARIO:
"{scenario_text}"

ALL CHARACTERS IN THE STORY:
{character_list}

CHARACTER TO UPDATE ({character_name}):
"{description}"

INSTRUCTIONS:
1. Examine the image carefully.
2. Rewrite ONLY the description of {character_name} so it matches the image: appearance, clothing, features.
3. Update references to {character_name} in the scenario so they stay consistent with the new appearance.
4. Keep every other character exactly as described. Do not remove or change them.
5. Keep all character interactions, plot elements, tone and style of the original.

Return the updated scenario and the updated description of {character_name} as JSON.
"""


def build_setting_rewrite_prompt(
    scenario_text: str,
    old_name: str,
    new_name: str,
    new_description: str
) -> str:
    return f"""Update the scenario below to reflect a change to one of its settings. The setting previously named "{old_name}" is now named "{new_name}" and is described as: "{new_description}".

CURRENT SCENARIO:
"{scenario_text}"

INSTRUCTIONS:
1. Replace every reference to "{old_name}" with "{new_name}" if the name changed.
2. Update any description of the setting in the scenario to match the new description.
3. Keep the story coherent, with the same tone, style and roughly the same length.

Return ONLY the updated scenario text, with no formatting or explanation.
"""


def build_character_rewrite_prompt(
    scenario_text: str,
    old_name: str,
    new_name: str,
    new_description: str
) -> str:
    return f"""Update the scenario below to reflect a change to one of its characters. The character previously named "{old_name}" is now named "{new_name}" and is described as: "{new_description}".

CURRENT SCENARIO:
"{scenario_text}"

INSTRUCTIONS:
1. Replace every reference to "{old_name}" with "{new_name}" if the name changed.
2. Update any description of the character in the scenario to match the new description.
3. Keep the story coherent, with the same tone, style and roughly the same length.

Return ONLY the updated scenario text, with no formatting or explanation.
"""
