"""Wire models (JSON, camelCase) shared by the REST API and the client stores."""

from datetime import datetime
from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from kith.application import InteractionView
from kith.domain import Person, format_notes, notes_from_json, notes_to_json


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


T = TypeVar("T")
# Request fields where an empty string means "not given".
Blankable = Annotated[T | None, BeforeValidator(_blank_to_none)]

# Holds a domain Notes value; accepts and emits the raw JSON form.
NotesField = Annotated[
    Any,
    BeforeValidator(notes_from_json),
    PlainSerializer(notes_to_json),
]


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersonPayload(WireModel):
    """Create/update body. Every field optional here; the service decides what is required."""

    name: Blankable[str] = None
    origin: Blankable[str] = None
    relationship_type: Blankable[str] = None
    relationship_strength: Blankable[int] = None
    occupation: Blankable[str] = None
    context: Blankable[str] = None


class InteractionPayload(WireModel):
    person_id: Blankable[str] = None
    title: Blankable[str] = None
    place_name: Blankable[str] = None
    latitude: Blankable[float] = None
    longitude: Blankable[float] = None
    interaction_time: Blankable[datetime] = None
    notes: NotesField = None


class PersonRecord(WireModel):
    id: str
    user_id: str
    name: str
    origin: str | None = None
    relationship_type: str
    relationship_strength: int
    occupation: str | None = None
    context: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, person: Person) -> "PersonRecord":
        return cls(
            id=person.id,
            user_id=person.user_id,
            name=person.name,
            origin=person.origin,
            relationship_type=person.relationship_type,
            relationship_strength=person.relationship_strength,
            occupation=person.occupation,
            context=person.context,
            created_at=person.created_at,
            updated_at=person.updated_at,
        )


class PersonRefRecord(WireModel):
    id: str
    name: str


class InteractionRecord(WireModel):
    id: str
    person_id: str
    title: str
    place_name: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    interaction_time: datetime | None = None
    notes: NotesField = None
    created_at: datetime
    updated_at: datetime
    person: PersonRefRecord | None = None

    @property
    def occurred_at(self) -> datetime:
        return self.interaction_time or self.created_at

    @property
    def notes_text(self) -> str:
        return format_notes(self.notes)

    @classmethod
    def from_view(cls, view: InteractionView) -> "InteractionRecord":
        i = view.interaction
        person = (
            PersonRefRecord(id=view.person.id, name=view.person.name)
            if view.person
            else None
        )
        return cls(
            id=i.id,
            person_id=i.person_id,
            title=i.title,
            place_name=i.place_name,
            latitude=i.latitude,
            longitude=i.longitude,
            interaction_time=i.interaction_time,
            notes=i.notes,
            created_at=i.created_at,
            updated_at=i.updated_at,
            person=person,
        )


def to_json(model: BaseModel) -> dict:
    return model.model_dump(mode="json", by_alias=True)
