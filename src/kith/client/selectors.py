"""View-side filtering, sorting and grouping over store items."""

import json
import string
from collections.abc import Iterable

from kith.domain import StructuredNotes
from kith.schemas import InteractionRecord, PersonRecord

ALPHABET = tuple(string.ascii_uppercase)


def search_persons(persons: Iterable[PersonRecord] | None, query: str) -> list[PersonRecord]:
    """Persons whose name contains query (case-insensitive), sorted by name."""
    needle = (query or "").strip().lower()
    matches = [p for p in persons or () if needle in p.name.lower()]
    return sorted(matches, key=lambda p: p.name.lower())


def group_persons_by_initial(
    persons: Iterable[PersonRecord] | None, query: str = ""
) -> dict[str, list[PersonRecord]]:
    """Alphabetical sections keyed by upper-cased first letter.

    With a blank query every letter A-Z is present (possibly empty) and names
    starting with anything else are left out. With a query only letters that
    have matches appear, including non A-Z initials.
    """
    matches = search_persons(persons, query)
    if not (query or "").strip():
        groups: dict[str, list[PersonRecord]] = {letter: [] for letter in ALPHABET}
        for person in matches:
            initial = person.name[:1].upper()
            if initial in groups:
                groups[initial].append(person)
        return groups
    groups = {}
    for person in matches:
        groups.setdefault(person.name[:1].upper(), []).append(person)
    return dict(sorted(groups.items()))


def _notes_haystack(interaction: InteractionRecord) -> str:
    # Structured notes are searched in compact JSON form: {"grade":"V4"}.
    if isinstance(interaction.notes, StructuredNotes):
        return json.dumps(interaction.notes.value, separators=(",", ":"), ensure_ascii=False)
    return interaction.notes_text


def search_interactions(
    interactions: Iterable[InteractionRecord] | None,
    query: str = "",
    person_id: str | None = None,
) -> list[InteractionRecord]:
    """Match query against title, place name and notes; keep input order."""
    needle = (query or "").strip().lower()
    out = []
    for interaction in interactions or ():
        if person_id and interaction.person_id != person_id:
            continue
        haystacks = (
            interaction.title or "",
            interaction.place_name or "",
            _notes_haystack(interaction),
        )
        if not needle or any(needle in h.lower() for h in haystacks):
            out.append(interaction)
    return out


def sort_by_occurrence(
    interactions: Iterable[InteractionRecord] | None, descending: bool = True
) -> list[InteractionRecord]:
    """Order by interaction time, falling back to creation time."""
    return sorted(interactions or (), key=lambda i: i.occurred_at, reverse=descending)
