"""Store context: one HTTP client and the two resource stores, handed to the views."""

import httpx

from kith.client.api import INTERACTIONS, PERSONS, ResourceApi, create_http_client
from kith.client.store import ResourceStore
from kith.schemas import InteractionRecord, PersonRecord

PersonStore = ResourceStore[PersonRecord]
InteractionStore = ResourceStore[InteractionRecord]


def person_store(http: httpx.AsyncClient, *, serialize: bool = False) -> PersonStore:
    return ResourceStore(ResourceApi(http, PERSONS), serialize=serialize)


def interaction_store(
    http: httpx.AsyncClient, *, serialize: bool = False
) -> InteractionStore:
    return ResourceStore(ResourceApi(http, INTERACTIONS), serialize=serialize)


class StoreContext:
    """Owns the session's stores. Pass it to views instead of reaching for globals.

    Usage::

        async with StoreContext.connect("http://localhost:8000", user_id) as stores:
            await stores.persons.ensure_loaded()
    """

    def __init__(self, http: httpx.AsyncClient, *, serialize: bool = False) -> None:
        self.http = http
        self.persons = person_store(http, serialize=serialize)
        self.interactions = interaction_store(http, serialize=serialize)

    @classmethod
    def connect(
        cls,
        base_url: str,
        user_id: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        serialize: bool = False,
    ) -> "StoreContext":
        http = create_http_client(base_url, user_id, transport=transport)
        return cls(http, serialize=serialize)

    def reset(self) -> None:
        """Forget every cached entity (sign-out)."""
        self.persons.reset()
        self.interactions.reset()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "StoreContext":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
