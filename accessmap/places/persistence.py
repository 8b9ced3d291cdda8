from __future__ import annotations

from abc import ABC, abstractmethod

from .models import CounterField, PersistenceStrategy, Place
from .store import PlaceStore


class CounterWriter(ABC):
    """Applies a +1 corroboration to a record according to where it lives."""

    strategy: PersistenceStrategy
    refresh_after_write: bool = False

    @abstractmethod
    async def increment(self, record_id: str, place: Place | None, field: CounterField) -> None:
        ...


class LocalCounterWriter(CounterWriter):
    """Mutates the cached record only; the change is gone after the next load."""

    strategy = PersistenceStrategy.local

    async def increment(self, record_id: str, place: Place | None, field: CounterField) -> None:
        if place is None:
            raise LookupError(f"No cached place with id {record_id!r}")
        setattr(place, field.value, getattr(place, field.value) + 1)


class RemoteCounterWriter(CounterWriter):
    strategy = PersistenceStrategy.remote
    refresh_after_write = True

    def __init__(self, store: PlaceStore) -> None:
        self._store = store

    async def increment(self, record_id: str, place: Place | None, field: CounterField) -> None:
        await self._store.increment(record_id, field, 1)


def build_writers(store: PlaceStore) -> dict[PersistenceStrategy, CounterWriter]:
    writers: list[CounterWriter] = [LocalCounterWriter(), RemoteCounterWriter(store)]
    return {w.strategy: w for w in writers}
