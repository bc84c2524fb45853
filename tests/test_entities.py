"""Unit tests for domain entities and the Notes union."""

from datetime import datetime, timedelta, timezone

import pytest

from kith.domain import (
    Interaction,
    Person,
    PlainNotes,
    StructuredNotes,
    format_notes,
    notes_from_json,
    notes_to_json,
)


def _person(**overrides) -> Person:
    fields = {
        "user_id": "user-1",
        "name": "Alice",
        "relationship_type": "Friend",
        "relationship_strength": 4,
    }
    fields.update(overrides)
    return Person(**fields)


def test_person_gets_id_and_timestamps() -> None:
    person = _person()
    assert person.id
    assert person.created_at.tzinfo is not None
    assert person.updated_at >= person.created_at
    assert _person().id != person.id


@pytest.mark.parametrize(
    "overrides",
    [{"name": ""}, {"name": "   "}, {"relationship_type": ""}, {"relationship_strength": None}],
)
def test_person_requires_name_type_and_strength(overrides) -> None:
    with pytest.raises(ValueError, match="are required"):
        _person(**overrides)


@pytest.mark.parametrize("strength", [0, 6, 7, -1])
def test_person_strength_out_of_range(strength) -> None:
    with pytest.raises(ValueError, match="between 1 and 5"):
        _person(relationship_strength=strength)


@pytest.mark.parametrize("strength", [1, 5])
def test_person_strength_bounds_inclusive(strength) -> None:
    assert _person(relationship_strength=strength).relationship_strength == strength


def test_interaction_requires_person_id_then_title() -> None:
    with pytest.raises(ValueError, match="Person ID is required"):
        Interaction(person_id="", title="")
    with pytest.raises(ValueError, match="Title is required"):
        Interaction(person_id="p1", title=" ")


def test_interaction_occurred_at_falls_back_to_created_at() -> None:
    logged = Interaction(person_id="p1", title="Coffee")
    assert logged.occurred_at == logged.created_at

    when = datetime.now(timezone.utc) - timedelta(days=3)
    dated = Interaction(person_id="p1", title="Coffee", interaction_time=when)
    assert dated.occurred_at == when


def test_notes_from_json() -> None:
    assert notes_from_json(None) is None
    assert notes_from_json("") is None
    assert notes_from_json("met at the park") == PlainNotes("met at the park")
    assert notes_from_json({"mood": "great"}) == StructuredNotes({"mood": "great"})
    assert notes_from_json([1, 2]) == StructuredNotes([1, 2])
    assert notes_from_json(0) == StructuredNotes(0)
    already = PlainNotes("x")
    assert notes_from_json(already) is already


def test_notes_to_json() -> None:
    assert notes_to_json(None) is None
    assert notes_to_json(PlainNotes("hi")) == "hi"
    assert notes_to_json(StructuredNotes({"a": 1})) == {"a": 1}


def test_format_notes() -> None:
    assert format_notes(None) == ""
    assert format_notes(PlainNotes("hello")) == "hello"
    assert format_notes(StructuredNotes({"topic": "jobs"})) == '{\n  "topic": "jobs"\n}'
