"""
Prompt templates for scenario generation.
"""

from shared.models.scenario import GENRES, MOODS, Language

CHARACTER_DESCRIPTION_HINT = (
    "Be hyper-specific and affirmative. Include age, gender, ethnicity, specific facial "
    "features if any, hair style and color, facial hair or its absence, skin details and "
    "exact clothing including textures and accessories."
)

SETTING_DESCRIPTION_HINT = (
    "Establish the atmosphere, lighting and key features that must stay consistent. "
    "Describe the mood, the materials, the light and the feeling of the air."
)


def _bullets(values) -> str:
    return "\n".join(f"- {value}" for value in values)


def build_scenario_prompt(pitch: str, num_scenes: int, style: str, language: Language) -> str:
    """
    Build the prompt asking the text model for a scenario as a JSON object.

    Args:
        pitch: Story pitch written by the user
        num_scenes: Number of scenes the storyboard will have (sizes the story)
        style: Visual style, for context only
        language: Language the scenario text and descriptions are written in
    """
    return f"""You are writing the scenario of a short movie that will be illustrated as a storyboard of {num_scenes} scenes in a {style} style.

1. The story pitch below is the foundation of the scenario. Stay as close to it as possible.

<pitch>
{pitch}
</pitch>

2. Write the scenario in {language.name}. Do not include children.

3. Pick the music genre that best fits the movie, exactly one of:
{_bullets(GENRES)}

4. Pick the mood of the movie, exactly one of:
{_bullets(MOODS)}

5. Write a short description of the music, in English only. No references to the story, to known artists or to songs.

6. From the scenario, describe every character (key "characters") and every setting (key "settings") with a name and a description in {language.name}.
Character descriptions: {CHARACTER_DESCRIPTION_HINT}
Setting descriptions: {SETTING_DESCRIPTION_HINT}
Names must be unique.

Answer with a JSON object only, shaped like this:
{{
  "scenario": "<the scenario>",
  "genre": "<one genre from the list>",
  "mood": "<one mood from the list>",
  "music": "<music description in English>",
  "language": {{"name": "{language.name}", "code": "{language.code}"}},
  "characters": [{{"name": "<name>", "description": "<description>"}}],
  "settings": [{{"name": "<name>", "description": "<description>"}}]
}}
"""
