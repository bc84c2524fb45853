"""Client data layer: resource stores over the Kith REST API, plus view selectors."""

from kith.client.api import INTERACTIONS, PERSONS, ApiError, Resource, ResourceApi
from kith.client.context import (
    InteractionStore,
    PersonStore,
    StoreContext,
    interaction_store,
    person_store,
)
from kith.client.selectors import (
    group_persons_by_initial,
    search_interactions,
    search_persons,
    sort_by_occurrence,
)
from kith.client.store import ResourceStore, StoreState

__all__ = [
    "INTERACTIONS",
    "PERSONS",
    "ApiError",
    "InteractionStore",
    "PersonStore",
    "Resource",
    "ResourceApi",
    "ResourceStore",
    "StoreContext",
    "StoreState",
    "group_persons_by_initial",
    "interaction_store",
    "person_store",
    "search_interactions",
    "search_persons",
    "sort_by_occurrence",
]
