"""Application layer: use cases, ports, and DTOs. Depends only on domain."""

from kith.application.dto import InteractionView, Invalid, NotFound, PersonRef
from kith.application.interaction_service import InteractionService
from kith.application.person_service import PersonService
from kith.application.ports import InteractionRepository, PersonRepository

__all__ = [
    "InteractionRepository",
    "InteractionService",
    "InteractionView",
    "Invalid",
    "NotFound",
    "PersonRef",
    "PersonRepository",
    "PersonService",
]
