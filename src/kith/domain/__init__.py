"""Domain layer: entities and value objects. No dependencies on outer layers."""

from kith.domain.entities import Interaction, Person
from kith.domain.notes import (
    Notes,
    PlainNotes,
    StructuredNotes,
    format_notes,
    notes_from_json,
    notes_to_json,
)

__all__ = [
    "Interaction",
    "Notes",
    "Person",
    "PlainNotes",
    "StructuredNotes",
    "format_notes",
    "notes_from_json",
    "notes_to_json",
]
