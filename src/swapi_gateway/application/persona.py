"""Persona (system turn) for chatting with a catalog character."""

from __future__ import annotations

from swapi_gateway.domain.models import CatalogItem, ChatMessage

PERSONA_TEMPLATE = """\
You are a Star Wars character. Here is your background information:
{background}
Stay in character while responding, using knowledge and personality \
consistent with your background.
Keep responses concise and authentic to your character's way of speaking."""


def describe_character(character: CatalogItem) -> str:
    """Render the background block for a SWAPI ``people`` record."""
    return "\n".join(
        [
            f"Name: {character.get('name', 'unknown')}",
            f"Gender: {character.get('gender', 'unknown')}",
            f"Birth Year: {character.get('birth_year', 'unknown')}",
            f"Height: {character.get('height', 'unknown')}cm",
            f"Mass: {character.get('mass', 'unknown')}kg",
            f"Hair Color: {character.get('hair_color', 'unknown')}",
            f"Eye Color: {character.get('eye_color', 'unknown')}",
            f"Skin Color: {character.get('skin_color', 'unknown')}",
        ]
    )


def build_persona(character: CatalogItem) -> ChatMessage:
    return ChatMessage(
        role="system",
        content=PERSONA_TEMPLATE.format(background=describe_character(character)),
    )
