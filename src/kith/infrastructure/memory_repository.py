"""In-memory implementations of PersonRepository and InteractionRepository (no DB)."""

from collections.abc import Iterable

from kith.domain import Interaction, Person


class InMemoryPersonRepository:
    """Stores persons in memory, keyed by id. Ownership is checked on every lookup."""

    def __init__(self) -> None:
        self._by_id: dict[str, Person] = {}
        self._order: list[str] = []

    def add(self, person: Person) -> None:
        if person.id in self._by_id:
            return
        self._by_id[person.id] = person
        self._order.append(person.id)

    def save(self, person: Person) -> None:
        if person.id in self._by_id:
            self._by_id[person.id] = person

    def get(self, user_id: str, person_id: str) -> Person | None:
        person = self._by_id.get(person_id)
        if person is None or person.user_id != user_id:
            return None
        return person

    def list_for_user(self, user_id: str) -> list[Person]:
        # Newest insertion first, so equal timestamps still come out newest first.
        owned = [
            self._by_id[pid]
            for pid in reversed(self._order)
            if self._by_id[pid].user_id == user_id
        ]
        return sorted(owned, key=lambda p: p.created_at, reverse=True)

    def remove(self, user_id: str, person_id: str) -> bool:
        if self.get(user_id, person_id) is None:
            return False
        del self._by_id[person_id]
        self._order.remove(person_id)
        return True


class InMemoryInteractionRepository:
    """Stores interactions in memory. Order preserved by insertion."""

    def __init__(self) -> None:
        self._by_id: dict[str, Interaction] = {}

    def add(self, interaction: Interaction) -> None:
        self._by_id.setdefault(interaction.id, interaction)

    def save(self, interaction: Interaction) -> None:
        if interaction.id in self._by_id:
            self._by_id[interaction.id] = interaction

    def get(self, interaction_id: str) -> Interaction | None:
        return self._by_id.get(interaction_id)

    def list_for_persons(self, person_ids: Iterable[str]) -> list[Interaction]:
        wanted = set(person_ids)
        return [i for i in self._by_id.values() if i.person_id in wanted]

    def remove(self, interaction_id: str) -> bool:
        return self._by_id.pop(interaction_id, None) is not None

    def remove_for_person(self, person_id: str) -> int:
        doomed = [i.id for i in self._by_id.values() if i.person_id == person_id]
        for interaction_id in doomed:
            del self._by_id[interaction_id]
        return len(doomed)
