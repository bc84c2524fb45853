"""Interaction use cases.

One authorization rule covers every path: an interaction is visible to a user
iff the person it belongs to is owned by that user. Listings are joined with a
minimal person reference and ordered by occurrence time, newest first.
"""

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from kith.application.dto import InteractionView, Invalid, NotFound, PersonRef
from kith.application.person_service import PERSON_NOT_FOUND
from kith.application.ports import InteractionRepository, PersonRepository
from kith.domain import Interaction, Person, notes_from_json
from kith.domain.entities import utcnow

logger = logging.getLogger(__name__)

INTERACTION_NOT_FOUND = "Interaction not found"

EDITABLE_FIELDS = (
    "person_id",
    "title",
    "place_name",
    "latitude",
    "longitude",
    "interaction_time",
    "notes",
)


def parse_timestamp(value: Any) -> datetime | None:
    """ISO-8601 string or datetime to an aware datetime; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("interactionTime must be an ISO-8601 timestamp") from None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _coordinate(name: str, value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number") from None


def _normalize(data: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in EDITABLE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key in ("person_id", "title"):
            out[key] = "" if value is None else str(value).strip()
        elif key == "place_name":
            out[key] = (str(value).strip() or None) if value is not None else None
        elif key in ("latitude", "longitude"):
            out[key] = _coordinate(key.capitalize(), value)
        elif key == "interaction_time":
            out[key] = parse_timestamp(value)
        else:
            out[key] = notes_from_json(value)
    return out


class InteractionService:
    def __init__(
        self,
        persons: PersonRepository,
        interactions: InteractionRepository,
    ) -> None:
        self._persons = persons
        self._interactions = interactions

    def _owned_person(self, user_id: str, person_id: str) -> Person | None:
        if not person_id:
            return None
        return self._persons.get(user_id, person_id)

    def _view(self, interaction: Interaction, person: Person | None) -> InteractionView:
        ref = PersonRef(id=person.id, name=person.name) if person else None
        return InteractionView(interaction=interaction, person=ref)

    def list_interactions(
        self, user_id: str, person_id: str | None = None
    ) -> list[InteractionView] | NotFound:
        """All of the user's interactions, or one owned person's when person_id is given."""
        if person_id:
            person = self._owned_person(user_id, person_id)
            if person is None:
                return NotFound(reason=PERSON_NOT_FOUND)
            owned = {person.id: person}
        else:
            owned = {p.id: p for p in self._persons.list_for_user(user_id)}
        if not owned:
            return []
        found = self._interactions.list_for_persons(owned.keys())
        found.sort(key=lambda i: i.occurred_at, reverse=True)
        return [self._view(i, owned.get(i.person_id)) for i in found]

    def get_interaction(
        self, user_id: str, interaction_id: str
    ) -> InteractionView | NotFound:
        interaction = self._interactions.get(interaction_id)
        person = (
            self._owned_person(user_id, interaction.person_id) if interaction else None
        )
        if interaction is None or person is None:
            return NotFound(reason=INTERACTION_NOT_FOUND)
        return self._view(interaction, person)

    def create_interaction(
        self, user_id: str, data: Mapping[str, Any]
    ) -> InteractionView | Invalid | NotFound:
        try:
            fields = _normalize(data)
            interaction = Interaction(
                person_id=fields.get("person_id", ""),
                title=fields.get("title", ""),
                place_name=fields.get("place_name"),
                latitude=fields.get("latitude"),
                longitude=fields.get("longitude"),
                interaction_time=fields.get("interaction_time"),
                notes=fields.get("notes"),
            )
        except ValueError as e:
            return Invalid(reason=str(e))
        person = self._owned_person(user_id, interaction.person_id)
        if person is None:
            return NotFound(reason=PERSON_NOT_FOUND)
        self._interactions.add(interaction)
        logger.info("Created interaction %s for person %s", interaction.id, person.id)
        return self._view(interaction, person)

    def update_interaction(
        self, user_id: str, interaction_id: str, changes: Mapping[str, Any]
    ) -> InteractionView | Invalid | NotFound:
        """Merge changes; moving to another person requires owning that person too."""
        current = self.get_interaction(user_id, interaction_id)
        if isinstance(current, NotFound):
            return current
        try:
            updated = replace(
                current.interaction, **_normalize(changes), updated_at=utcnow()
            )
        except ValueError as e:
            return Invalid(reason=str(e))
        person = self._owned_person(user_id, updated.person_id)
        if person is None:
            return NotFound(reason=PERSON_NOT_FOUND)
        self._interactions.save(updated)
        return self._view(updated, person)

    def delete_interaction(self, user_id: str, interaction_id: str) -> bool:
        if isinstance(self.get_interaction(user_id, interaction_id), NotFound):
            return False
        return self._interactions.remove(interaction_id)
