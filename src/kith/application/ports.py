"""Application ports (interfaces). Implemented by infrastructure adapters."""

from collections.abc import Iterable
from typing import Protocol

from kith.domain import Interaction, Person


class PersonRepository(Protocol):
    """Persists persons. Every read and delete is scoped to the owning user."""

    def add(self, person: Person) -> None:
        """Store a new person."""
        ...

    def save(self, person: Person) -> None:
        """Replace the stored person with the same id."""
        ...

    def get(self, user_id: str, person_id: str) -> Person | None:
        """Return the person if it exists and belongs to user_id, else None."""
        ...

    def list_for_user(self, user_id: str) -> list[Person]:
        """Return the user's persons, newest created_at first."""
        ...

    def remove(self, user_id: str, person_id: str) -> bool:
        """Delete the person. Returns False if not found or not owned."""
        ...


class InteractionRepository(Protocol):
    """Persists interactions. Ownership is checked by the caller through the person."""

    def add(self, interaction: Interaction) -> None:
        ...

    def save(self, interaction: Interaction) -> None:
        ...

    def get(self, interaction_id: str) -> Interaction | None:
        ...

    def list_for_persons(self, person_ids: Iterable[str]) -> list[Interaction]:
        """Return interactions of any of the given persons, in no particular order."""
        ...

    def remove(self, interaction_id: str) -> bool:
        ...

    def remove_for_person(self, person_id: str) -> int:
        """Delete every interaction of a person. Returns how many were removed."""
        ...
