"""
Entity reference resolution.

Scene prompts refer to characters, props and settings by name only. Names are
the sole foreign key: resolution is an exact-name filter over the scenario's
collections, and a name with no matching entity is dropped without error.
"""

from dataclasses import dataclass, field
from typing import List

from shared.models.scenario import Entity, EntityRef, ImagePrompt, Scenario


@dataclass
class ResolvedReferences:
    characters: List[Entity] = field(default_factory=list)
    props: List[Entity] = field(default_factory=list)
    settings: List[Entity] = field(default_factory=list)

    def all(self) -> List[Entity]:
        """Characters, then props, then settings."""
        return self.characters + self.props + self.settings


def _match(entities: List[Entity], refs: List[EntityRef]) -> List[Entity]:
    wanted = {ref.name for ref in refs}
    return [entity for entity in entities if entity.name in wanted]


def resolve_references(scenario: Scenario, image_prompt: ImagePrompt) -> ResolvedReferences:
    """Resolve Subject/Prop/Context names against the scenario's entities."""
    return ResolvedReferences(
        characters=_match(scenario.characters, image_prompt.subject),
        props=_match(scenario.props, image_prompt.prop),
        settings=_match(scenario.settings, image_prompt.context),
    )


def inline_descriptions(scenario: Scenario, image_prompt: ImagePrompt) -> ImagePrompt:
    """
    Copy of the prompt with each reference's description filled in from the
    scenario, for text-only image generation. Unknown names keep whatever
    description the model wrote.
    """
    def _fill(entities: List[Entity], refs: List[EntityRef]) -> List[EntityRef]:
        by_name = {entity.name: entity for entity in entities}
        filled = []
        for ref in refs:
            entity = by_name.get(ref.name)
            description = entity.description if entity else ref.description
            filled.append(EntityRef(name=ref.name, description=description))
        return filled

    return image_prompt.model_copy(update={
        "subject": _fill(scenario.characters, image_prompt.subject),
        "prop": _fill(scenario.props, image_prompt.prop),
        "context": _fill(scenario.settings, image_prompt.context),
    })
