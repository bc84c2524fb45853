"""Person use cases: list, get, create, update, delete. Every call is scoped to one user."""

import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from kith.application.dto import Invalid, NotFound
from kith.application.ports import InteractionRepository, PersonRepository
from kith.domain import Person
from kith.domain.entities import STRENGTH_RANGE_MESSAGE, utcnow

logger = logging.getLogger(__name__)

PERSON_NOT_FOUND = "Person not found"

EDITABLE_FIELDS = (
    "name",
    "origin",
    "relationship_type",
    "relationship_strength",
    "occupation",
    "context",
)
_REQUIRED_TEXT = ("name", "relationship_type")


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None


def _coerce_strength(value: Any) -> int | None:
    """Accept ints and integral strings/floats ("4", 4.0). Raise ValueError otherwise."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(STRENGTH_RANGE_MESSAGE)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError(STRENGTH_RANGE_MESSAGE)


def _normalize(data: Mapping[str, Any]) -> dict[str, Any]:
    """Keep editable fields only; strip text, blank optional text becomes None."""
    out: dict[str, Any] = {}
    for key in EDITABLE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key == "relationship_strength":
            out[key] = _coerce_strength(value)
        elif key in _REQUIRED_TEXT:
            out[key] = "" if value is None else str(value).strip()
        else:
            out[key] = _clean_text(value)
    return out


class PersonService:
    """Ownership checks and validation for persons. Deleting a person deletes its interactions."""

    def __init__(
        self,
        persons: PersonRepository,
        interactions: InteractionRepository,
    ) -> None:
        self._persons = persons
        self._interactions = interactions

    def list_persons(self, user_id: str) -> list[Person]:
        return self._persons.list_for_user(user_id)

    def get_person(self, user_id: str, person_id: str) -> Person | NotFound:
        person = self._persons.get(user_id, person_id)
        if person is None:
            return NotFound(reason=PERSON_NOT_FOUND)
        return person

    def create_person(self, user_id: str, data: Mapping[str, Any]) -> Person | Invalid:
        try:
            fields = _normalize(data)
            person = Person(
                user_id=user_id,
                name=fields.get("name", ""),
                relationship_type=fields.get("relationship_type", ""),
                relationship_strength=fields.get("relationship_strength"),
                origin=fields.get("origin"),
                occupation=fields.get("occupation"),
                context=fields.get("context"),
            )
        except ValueError as e:
            return Invalid(reason=str(e))
        self._persons.add(person)
        logger.info("Created person %s for user %s", person.id, user_id)
        return person

    def update_person(
        self, user_id: str, person_id: str, changes: Mapping[str, Any]
    ) -> Person | Invalid | NotFound:
        """Merge changes onto the stored person, then apply the create-time rules to the result."""
        existing = self._persons.get(user_id, person_id)
        if existing is None:
            return NotFound(reason=PERSON_NOT_FOUND)
        try:
            updated = replace(existing, **_normalize(changes), updated_at=utcnow())
        except ValueError as e:
            return Invalid(reason=str(e))
        self._persons.save(updated)
        return updated

    def delete_person(self, user_id: str, person_id: str) -> bool:
        if self._persons.get(user_id, person_id) is None:
            return False
        removed = self._interactions.remove_for_person(person_id)
        self._persons.remove(user_id, person_id)
        logger.info(
            "Deleted person %s for user %s (%d interactions)", person_id, user_id, removed
        )
        return True
