"""Interaction notes: either plain text or an arbitrary structured (JSON) value."""

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PlainNotes:
    text: str


@dataclass(frozen=True)
class StructuredNotes:
    """Any JSON value that is not a string (object, list, number, bool)."""

    value: Any


Notes = PlainNotes | StructuredNotes


def notes_from_json(raw: Any) -> Notes | None:
    """Decode a wire value. Strings are plain text; null and "" mean no notes."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, PlainNotes | StructuredNotes):
        return raw
    if isinstance(raw, str):
        return PlainNotes(text=raw)
    return StructuredNotes(value=raw)


def notes_to_json(notes: Notes | None) -> Any:
    if notes is None:
        return None
    if isinstance(notes, PlainNotes):
        return notes.text
    return notes.value


def format_notes(notes: Notes | None) -> str:
    """Text shown to the user: plain text as-is, structured values pretty-printed."""
    if notes is None:
        return ""
    if isinstance(notes, PlainNotes):
        return notes.text
    return json.dumps(notes.value, indent=2, ensure_ascii=False)
