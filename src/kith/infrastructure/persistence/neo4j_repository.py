"""Neo4j implementations of PersonRepository and InteractionRepository.
Graph: (owner:Account {id: user_id})-[:KNOWS]->(p:Person)-[:HAD]->(i:Interaction).
Timestamps are stored as ISO-8601 strings; notes as their JSON encoding.
"""

import json
from collections.abc import Iterable
from datetime import datetime

from kith.domain import Interaction, Person, notes_from_json, notes_to_json

_CONSTRAINTS = (
    "CREATE CONSTRAINT account_id_unique IF NOT EXISTS "
    "FOR (a:Account) REQUIRE a.id IS UNIQUE",
    "CREATE CONSTRAINT person_id_unique IF NOT EXISTS "
    "FOR (p:Person) REQUIRE p.id IS UNIQUE",
    "CREATE CONSTRAINT interaction_id_unique IF NOT EXISTS "
    "FOR (i:Interaction) REQUIRE i.id IS UNIQUE",
)


def ensure_constraints(driver) -> None:
    """Create unique id constraints for Account, Person and Interaction if missing."""
    with driver.session() as session:
        for statement in _CONSTRAINTS:
            session.run(statement)


def _datetime_to_iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def _iso_to_datetime(s: str | None) -> datetime | None:
    if not s:
        return None
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _person_props(person: Person) -> dict:
    return {
        "id": person.id,
        "user_id": person.user_id,
        "name": person.name,
        "origin": person.origin,
        "relationship_type": person.relationship_type,
        "relationship_strength": person.relationship_strength,
        "occupation": person.occupation,
        "context": person.context,
        "created_at": _datetime_to_iso(person.created_at),
        "updated_at": _datetime_to_iso(person.updated_at),
    }


def _interaction_props(interaction: Interaction) -> dict:
    notes = notes_to_json(interaction.notes)
    return {
        "id": interaction.id,
        "person_id": interaction.person_id,
        "title": interaction.title,
        "place_name": interaction.place_name,
        "latitude": interaction.latitude,
        "longitude": interaction.longitude,
        "interaction_time": _datetime_to_iso(interaction.interaction_time),
        "notes_json": json.dumps(notes) if notes is not None else None,
        "created_at": _datetime_to_iso(interaction.created_at),
        "updated_at": _datetime_to_iso(interaction.updated_at),
    }


class Neo4jPersonRepository:
    """Stores persons in Neo4j. Each person hangs off its owner's Account node."""

    def __init__(self, driver: object) -> None:
        self._driver = driver

    def add(self, person: Person) -> None:
        with self._driver.session() as session:
            session.run(
                """
                MERGE (owner:Account {id: $user_id})
                CREATE (p:Person)
                SET p = $props
                CREATE (owner)-[:KNOWS]->(p)
                """,
                user_id=person.user_id,
                props=_person_props(person),
            )

    def save(self, person: Person) -> None:
        with self._driver.session() as session:
            session.run(
                """
                MATCH (:Account {id: $user_id})-[:KNOWS]->(p:Person {id: $id})
                SET p = $props
                """,
                user_id=person.user_id,
                id=person.id,
                props=_person_props(person),
            )

    def get(self, user_id: str, person_id: str) -> Person | None:
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH (:Account {id: $user_id})-[:KNOWS]->(p:Person {id: $id})
                RETURN p
                """,
                user_id=user_id,
                id=person_id,
            )
            record = result.single()
        if not record:
            return None
        return _record_to_person(record)

    def list_for_user(self, user_id: str) -> list[Person]:
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH (:Account {id: $user_id})-[:KNOWS]->(p:Person)
                RETURN p
                ORDER BY p.created_at DESC
                """,
                user_id=user_id,
            )
            return [_record_to_person(rec) for rec in result]

    def remove(self, user_id: str, person_id: str) -> bool:
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH (:Account {id: $user_id})-[:KNOWS]->(p:Person {id: $id})
                DETACH DELETE p
                RETURN 1 AS ok
                """,
                user_id=user_id,
                id=person_id,
            )
            return result.single() is not None


class Neo4jInteractionRepository:
    """Stores interactions in Neo4j, linked from their person by HAD."""

    def __init__(self, driver: object) -> None:
        self._driver = driver

    def add(self, interaction: Interaction) -> None:
        with self._driver.session() as session:
            session.run(
                """
                MATCH (p:Person {id: $person_id})
                CREATE (i:Interaction)
                SET i = $props
                CREATE (p)-[:HAD]->(i)
                """,
                person_id=interaction.person_id,
                props=_interaction_props(interaction),
            )

    def save(self, interaction: Interaction) -> None:
        with self._driver.session() as session:
            session.run(
                "MATCH (i:Interaction {id: $id}) SET i = $props",
                id=interaction.id,
                props=_interaction_props(interaction),
            )
            # Re-link when the interaction moved to another person.
            session.run(
                """
                MATCH (old:Person)-[r:HAD]->(:Interaction {id: $id})
                WHERE old.id <> $person_id
                DELETE r
                """,
                id=interaction.id,
                person_id=interaction.person_id,
            )
            session.run(
                """
                MATCH (p:Person {id: $person_id}), (i:Interaction {id: $id})
                MERGE (p)-[:HAD]->(i)
                """,
                id=interaction.id,
                person_id=interaction.person_id,
            )

    def get(self, interaction_id: str) -> Interaction | None:
        with self._driver.session() as session:
            result = session.run(
                "MATCH (i:Interaction {id: $id}) RETURN i",
                id=interaction_id,
            )
            record = result.single()
        if not record:
            return None
        return _record_to_interaction(record)

    def list_for_persons(self, person_ids: Iterable[str]) -> list[Interaction]:
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH (p:Person)-[:HAD]->(i:Interaction)
                WHERE p.id IN $person_ids
                RETURN i
                """,
                person_ids=list(person_ids),
            )
            return [_record_to_interaction(rec) for rec in result]

    def remove(self, interaction_id: str) -> bool:
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH (i:Interaction {id: $id})
                DETACH DELETE i
                RETURN 1 AS ok
                """,
                id=interaction_id,
            )
            return result.single() is not None

    def remove_for_person(self, person_id: str) -> int:
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH (:Person {id: $person_id})-[:HAD]->(i:Interaction)
                DETACH DELETE i
                RETURN count(i) AS removed
                """,
                person_id=person_id,
            )
            record = result.single()
        return record["removed"] if record else 0


def _record_to_person(record) -> Person:
    p = record["p"]
    return Person(
        id=p["id"],
        user_id=p["user_id"],
        name=p["name"],
        origin=p.get("origin"),
        relationship_type=p["relationship_type"],
        relationship_strength=p["relationship_strength"],
        occupation=p.get("occupation"),
        context=p.get("context"),
        created_at=_iso_to_datetime(p["created_at"]),
        updated_at=_iso_to_datetime(p["updated_at"]),
    )


def _record_to_interaction(record) -> Interaction:
    i = record["i"]
    notes_json = i.get("notes_json")
    return Interaction(
        id=i["id"],
        person_id=i["person_id"],
        title=i["title"],
        place_name=i.get("place_name"),
        latitude=i.get("latitude"),
        longitude=i.get("longitude"),
        interaction_time=_iso_to_datetime(i.get("interaction_time")),
        notes=notes_from_json(json.loads(notes_json)) if notes_json else None,
        created_at=_iso_to_datetime(i["created_at"]),
        updated_at=_iso_to_datetime(i["updated_at"]),
    )
