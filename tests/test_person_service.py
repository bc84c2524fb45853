"""Unit tests for PersonService. In-memory repositories only."""

from kith.application import Invalid, NotFound, PersonService
from kith.domain import Interaction, Person
from kith.infrastructure import InMemoryInteractionRepository, InMemoryPersonRepository


def _service() -> tuple[PersonService, InMemoryInteractionRepository]:
    interactions = InMemoryInteractionRepository()
    return PersonService(InMemoryPersonRepository(), interactions), interactions


def _alice(service: PersonService, user_id: str = "u1") -> Person:
    person = service.create_person(
        user_id,
        {"name": "Alice", "relationship_type": "Friend", "relationship_strength": 4},
    )
    assert isinstance(person, Person)
    return person


def test_create_person_stores_fields() -> None:
    service, _ = _service()
    person = service.create_person(
        "u1",
        {
            "name": "  Alice ",
            "relationship_type": "Friend",
            "relationship_strength": "4",
            "origin": "Climbing gym",
            "occupation": "",
        },
    )
    assert isinstance(person, Person)
    assert person.name == "Alice"
    assert person.relationship_strength == 4
    assert person.origin == "Climbing gym"
    assert person.occupation is None
    assert person.user_id == "u1"
    assert service.list_persons("u1") == [person]


def test_create_person_missing_fields() -> None:
    service, _ = _service()
    result = service.create_person("u1", {"name": "Bob"})
    assert isinstance(result, Invalid)
    assert result.reason == "Name, relationshipType, and relationshipStrength are required"
    assert service.list_persons("u1") == []


def test_create_person_strength_out_of_range() -> None:
    service, _ = _service()
    result = service.create_person(
        "u1", {"name": "Bob", "relationship_type": "Friend", "relationship_strength": 7}
    )
    assert result == Invalid(reason="Relationship strength must be between 1 and 5")


def test_create_person_strength_not_a_number() -> None:
    service, _ = _service()
    result = service.create_person(
        "u1", {"name": "Bob", "relationship_type": "Friend", "relationship_strength": "lots"}
    )
    assert isinstance(result, Invalid)


def test_list_is_newest_first_and_scoped_to_user() -> None:
    service, _ = _service()
    first = _alice(service)
    second = service.create_person(
        "u1", {"name": "Bob", "relationship_type": "Colleague", "relationship_strength": 2}
    )
    _alice(service, user_id="u2")
    assert [p.id for p in service.list_persons("u1")] == [second.id, first.id]
    assert len(service.list_persons("u2")) == 1


def test_get_person_of_other_user_is_not_found() -> None:
    service, _ = _service()
    person = _alice(service)
    assert service.get_person("u1", person.id) == person
    assert service.get_person("u2", person.id) == NotFound(reason="Person not found")


def test_update_person_merges_partial_changes() -> None:
    service, _ = _service()
    person = _alice(service)
    updated = service.update_person("u1", person.id, {"relationship_strength": 5})
    assert isinstance(updated, Person)
    assert updated.id == person.id
    assert updated.relationship_strength == 5
    assert updated.name == "Alice"
    assert updated.relationship_type == "Friend"
    assert updated.created_at == person.created_at
    assert updated.updated_at >= person.updated_at
    assert service.get_person("u1", person.id) == updated


def test_update_person_validates_merged_result() -> None:
    service, _ = _service()
    person = _alice(service)
    assert isinstance(service.update_person("u1", person.id, {"name": ""}), Invalid)
    assert isinstance(
        service.update_person("u1", person.id, {"relationship_strength": 0}), Invalid
    )
    assert service.get_person("u1", person.id) == person


def test_update_person_not_owned() -> None:
    service, _ = _service()
    person = _alice(service)
    result = service.update_person("u2", person.id, {"name": "Mallory"})
    assert isinstance(result, NotFound)
    assert service.get_person("u1", person.id).name == "Alice"


def test_update_person_ignores_unknown_fields() -> None:
    service, _ = _service()
    person = _alice(service)
    updated = service.update_person("u1", person.id, {"user_id": "u2", "id": "x"})
    assert isinstance(updated, Person)
    assert updated.user_id == "u1"
    assert updated.id == person.id


def test_delete_person_removes_interactions() -> None:
    service, interactions = _service()
    person = _alice(service)
    interactions.add(Interaction(person_id=person.id, title="Coffee"))
    assert service.delete_person("u1", person.id) is True
    assert service.list_persons("u1") == []
    assert interactions.list_for_persons([person.id]) == []


def test_delete_person_not_found_or_not_owned() -> None:
    service, _ = _service()
    person = _alice(service)
    assert service.delete_person("u2", person.id) is False
    assert service.delete_person("u1", "missing") is False
    assert service.list_persons("u1") == [person]
