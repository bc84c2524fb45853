"""HTTP access to one REST resource (persons or interactions) over httpx."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel

from kith.schemas import InteractionPayload, InteractionRecord, PersonPayload, PersonRecord

USER_ID_HEADER = "X-User-Id"
DEFAULT_TIMEOUT = 10.0

EntityT = TypeVar("EntityT", bound=BaseModel)


class ApiError(Exception):
    """A request the API answered with an error (or did not answer usefully)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class Resource(Generic[EntityT]):
    """Endpoint description for one entity type."""

    path: str
    model: type[EntityT]
    payload: type[BaseModel]
    singular: str
    plural: str
    # Query parameter that scopes a listing to a parent entity, if any.
    parent_param: str | None = None

    def decode(self, raw: Any) -> EntityT:
        return self.model.model_validate(raw)

    def encode(self, data: Any) -> dict:
        """Snake_case or camelCase mapping (or payload model) to the JSON body; unset keys dropped."""
        body = data if isinstance(data, self.payload) else self.payload.model_validate(data)
        return body.model_dump(mode="json", by_alias=True, exclude_unset=True)


PERSONS = Resource(
    path="/api/persons",
    model=PersonRecord,
    payload=PersonPayload,
    singular="person",
    plural="persons",
)

INTERACTIONS = Resource(
    path="/api/interactions",
    model=InteractionRecord,
    payload=InteractionPayload,
    singular="interaction",
    plural="interactions",
    parent_param="personId",
)


def create_http_client(
    base_url: str,
    user_id: str | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> httpx.AsyncClient:
    headers = {USER_ID_HEADER: user_id} if user_id else {}
    return httpx.AsyncClient(
        base_url=base_url, headers=headers, transport=transport, timeout=timeout
    )


def _raise_for_error(response: httpx.Response, fallback: str) -> None:
    if response.is_success:
        return
    message = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        message = str(body["error"])
    raise ApiError(message or fallback, status_code=response.status_code)


class ResourceApi(Generic[EntityT]):
    """List/get/create/update/delete for one resource. Raises ApiError on failure."""

    def __init__(self, http: httpx.AsyncClient, resource: Resource[EntityT]) -> None:
        self._http = http
        self.resource = resource

    def _item_path(self, entity_id: str) -> str:
        return f"{self.resource.path}/{entity_id}"

    async def list_all(self, parent_id: str | None = None) -> list[EntityT]:
        params = {}
        if parent_id:
            if self.resource.parent_param is None:
                raise ValueError(f"{self.resource.plural} cannot be filtered by parent")
            params[self.resource.parent_param] = parent_id
        response = await self._http.get(self.resource.path, params=params)
        _raise_for_error(response, f"Failed to fetch {self.resource.plural}")
        body = response.json()
        if body is None:
            return []
        if not isinstance(body, list):
            raise ApiError(f"Failed to fetch {self.resource.plural}", response.status_code)
        return [self.resource.decode(raw) for raw in body]

    async def get(self, entity_id: str) -> EntityT:
        response = await self._http.get(self._item_path(entity_id))
        _raise_for_error(response, f"Failed to fetch {self.resource.singular}")
        return self.resource.decode(response.json())

    async def create(self, data: Any) -> EntityT:
        response = await self._http.post(self.resource.path, json=self.resource.encode(data))
        _raise_for_error(response, f"Failed to create {self.resource.singular}")
        return self.resource.decode(response.json())

    async def update(self, entity_id: str, changes: Any) -> EntityT:
        response = await self._http.patch(
            self._item_path(entity_id), json=self.resource.encode(changes)
        )
        _raise_for_error(response, f"Failed to update {self.resource.singular}")
        return self.resource.decode(response.json())

    async def delete(self, entity_id: str) -> None:
        response = await self._http.delete(self._item_path(entity_id))
        _raise_for_error(response, f"Failed to delete {self.resource.singular}")
