"""Domain entities: Person and Interaction."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from kith.domain.notes import Notes

MIN_STRENGTH = 1
MAX_STRENGTH = 5

PERSON_REQUIRED_MESSAGE = "Name, relationshipType, and relationshipStrength are required"
STRENGTH_RANGE_MESSAGE = (
    f"Relationship strength must be between {MIN_STRENGTH} and {MAX_STRENGTH}"
)
PERSON_ID_REQUIRED_MESSAGE = "Person ID is required"
TITLE_REQUIRED_MESSAGE = "Title is required"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


@dataclass(frozen=True)
class Person:
    """
    A real individual known by the user, owned by exactly one user.
    relationship_strength is 1 (acquaintance) to 5 (closest).
    """

    user_id: str
    name: str
    relationship_type: str
    relationship_strength: int
    id: str = field(default_factory=_new_id)
    origin: str | None = None
    occupation: str | None = None
    context: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        if (
            _blank(self.name)
            or _blank(self.relationship_type)
            or self.relationship_strength is None
        ):
            raise ValueError(PERSON_REQUIRED_MESSAGE)
        if not MIN_STRENGTH <= self.relationship_strength <= MAX_STRENGTH:
            raise ValueError(STRENGTH_RANGE_MESSAGE)


@dataclass(frozen=True)
class Interaction:
    """
    A logged meeting or event with one Person.
    Ownership follows the person: there is no user id on the interaction itself.
    """

    person_id: str
    title: str
    id: str = field(default_factory=_new_id)
    place_name: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    interaction_time: datetime | None = None
    notes: Notes | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        if _blank(self.person_id):
            raise ValueError(PERSON_ID_REQUIRED_MESSAGE)
        if _blank(self.title):
            raise ValueError(TITLE_REQUIRED_MESSAGE)

    @property
    def occurred_at(self) -> datetime:
        """When the interaction happened; falls back to when it was logged."""
        return self.interaction_time or self.created_at
