"""Infrastructure layer: concrete implementations of application ports."""

from kith.infrastructure.memory_repository import (
    InMemoryInteractionRepository,
    InMemoryPersonRepository,
)
from kith.infrastructure.persistence.neo4j_repository import (
    Neo4jInteractionRepository,
    Neo4jPersonRepository,
    ensure_constraints,
)

__all__ = [
    "InMemoryInteractionRepository",
    "InMemoryPersonRepository",
    "Neo4jInteractionRepository",
    "Neo4jPersonRepository",
    "ensure_constraints",
]
