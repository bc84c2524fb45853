"""Client-side resource store: cached collection plus loading/error/selection state.

One generic implementation serves every entity type. State is an immutable
snapshot replaced in a single step, so subscribers only ever observe the state
before an action or after it, never a partial merge.

Async actions never raise: failures land in ``error`` and the action returns
None (create/update) or False (delete). Overlapping actions are not
coordinated unless the store was built with ``serialize=True``; otherwise the
last completion to write wins. A listener that raises is logged and skipped.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Generic

from kith.client.api import ApiError, EntityT, ResourceApi

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An error occurred"


@dataclass(frozen=True)
class StoreState(Generic[EntityT]):
    # None means "not fetched yet"; an empty tuple is a loaded, empty collection.
    items: tuple[EntityT, ...] | None = None
    loading: bool = False
    error: str | None = None
    selected: EntityT | None = None


Listener = Callable[[StoreState], None]


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ApiError):
        return exc.message
    return str(exc) or GENERIC_ERROR


class ResourceStore(Generic[EntityT]):
    def __init__(self, api: ResourceApi[EntityT], *, serialize: bool = False) -> None:
        self._api = api
        self._state: StoreState[EntityT] = StoreState()
        self._listeners: list[Listener] = []
        self._lock = asyncio.Lock() if serialize else None

    @property
    def name(self) -> str:
        return self._api.resource.plural

    # --- state ---

    @property
    def state(self) -> StoreState[EntityT]:
        return self._state

    @property
    def items(self) -> tuple[EntityT, ...] | None:
        return self._state.items

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def selected(self) -> EntityT | None:
        return self._state.selected

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: StoreState[EntityT]) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("%s store listener failed", self.name)

    def _set(self, **changes: Any) -> None:
        self._publish(replace(self._state, **changes))

    # --- sync actions ---

    def set_loading(self, loading: bool) -> None:
        self._set(loading=loading)

    def set_error(self, error: str | None) -> None:
        self._set(error=error, loading=False)

    def clear_error(self) -> None:
        self._set(error=None)

    def select(self, entity: EntityT | None) -> None:
        self._set(selected=entity)

    def reset(self) -> None:
        self._publish(StoreState())

    # --- async actions ---

    def _exclusive(self):
        return self._lock if self._lock is not None else contextlib.nullcontext()

    def _fail(self, action: str, exc: Exception) -> None:
        message = _error_message(exc)
        logger.warning("%s %s failed: %s", self.name, action, message)
        self.set_error(message)

    async def fetch_all(self, parent_id: str | None = None) -> None:
        """Replace the cache with the server's list. A failure keeps the old cache."""
        async with self._exclusive():
            self._set(loading=True, error=None)
            try:
                fetched = await self._api.list_all(parent_id)
            except Exception as e:
                self._fail("fetch", e)
                return
            self._set(items=tuple(fetched), loading=False, error=None)

    async def ensure_loaded(self, parent_id: str | None = None) -> None:
        """Fetch only if nothing is cached yet and no error is recorded (page mount)."""
        if self._state.items is None and self._state.error is None:
            await self.fetch_all(parent_id)

    async def create(self, data: Any) -> EntityT | None:
        async with self._exclusive():
            self._set(loading=True, error=None)
            try:
                created = await self._api.create(data)
            except Exception as e:
                self._fail("create", e)
                return None
            self._set(
                items=(created, *(self._state.items or ())),
                loading=False,
                error=None,
            )
            return created

    async def update(self, entity_id: str, changes: Any) -> EntityT | None:
        async with self._exclusive():
            self._set(loading=True, error=None)
            try:
                updated = await self._api.update(entity_id, changes)
            except Exception as e:
                self._fail("update", e)
                return None
            state = self._state
            items = state.items
            if items is not None:
                items = tuple(updated if item.id == updated.id else item for item in items)
            selected = state.selected
            if selected is not None and selected.id == updated.id:
                selected = updated
            self._set(items=items, selected=selected, loading=False, error=None)
            return updated

    async def delete(self, entity_id: str) -> bool:
        async with self._exclusive():
            self._set(loading=True, error=None)
            try:
                await self._api.delete(entity_id)
            except Exception as e:
                self._fail("delete", e)
                return False
            state = self._state
            items = state.items
            if items is not None:
                items = tuple(item for item in items if item.id != entity_id)
            selected = state.selected
            if selected is not None and selected.id == entity_id:
                selected = None
            self._set(items=items, selected=selected, loading=False, error=None)
            return True
