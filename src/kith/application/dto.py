"""Result types returned by the application services."""

from dataclasses import dataclass

from kith.domain import Interaction


@dataclass(frozen=True)
class Invalid:
    """Input rejected by validation."""

    reason: str


@dataclass(frozen=True)
class NotFound:
    """Entity absent, or owned by another user (reported the same way)."""

    reason: str


@dataclass(frozen=True)
class PersonRef:
    """Minimal person attached to listed interactions."""

    id: str
    name: str


@dataclass(frozen=True)
class InteractionView:
    """An interaction joined with the person it belongs to."""

    interaction: Interaction
    person: PersonRef | None = None
