"""
Kith core: clean-architecture layout.

- domain: entities (Person, Interaction) and the Notes union. No outer dependencies.
- application: use cases (PersonService, InteractionService), ports, DTOs.
- infrastructure: adapters (in-memory and Neo4j repositories).
- schemas: JSON wire models shared by the API and the client.
- client: resource stores that cache API collections for the views.
"""

from kith.application import (
    InteractionRepository,
    InteractionService,
    InteractionView,
    Invalid,
    NotFound,
    PersonRef,
    PersonRepository,
    PersonService,
)
from kith.domain import Interaction, Notes, Person, PlainNotes, StructuredNotes
from kith.infrastructure import (
    InMemoryInteractionRepository,
    InMemoryPersonRepository,
    Neo4jInteractionRepository,
    Neo4jPersonRepository,
)

__all__ = [
    "InMemoryInteractionRepository",
    "InMemoryPersonRepository",
    "Interaction",
    "InteractionRepository",
    "InteractionService",
    "InteractionView",
    "Invalid",
    "Neo4jInteractionRepository",
    "Neo4jPersonRepository",
    "Notes",
    "NotFound",
    "Person",
    "PersonRef",
    "PersonRepository",
    "PersonService",
    "PlainNotes",
    "StructuredNotes",
]
