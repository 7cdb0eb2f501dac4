from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, List, Optional

from .context import Context, T


# PUBLIC_INTERFACE
class Repository(ABC, Generic[T]):
    """
    CRUD contract over a collection of records addressed by string id.

    Not-found is reported by returning None; no operation raises.
    insert/update/upsert return the value that was already stored (None when
    nothing was), not the value that was written.
    """

    @abstractmethod
    def get(self, entity_id: str) -> Optional[T]:
        """Return the entity with this id, or None."""

    @abstractmethod
    def get_all(self) -> List[T]:
        """Return every entity in stored order."""

    @abstractmethod
    def insert(self, entity: T) -> Optional[T]:
        """Append a new entity. If the id is taken, return the stored entity and change nothing."""

    @abstractmethod
    def update(self, entity: T) -> Optional[T]:
        """Replace the entity with the same id in place. Return the previous value, or None if absent."""

    @abstractmethod
    def upsert(self, entity: T) -> Optional[T]:
        """Update if the id exists, otherwise append. Return the previous value, or None."""

    @abstractmethod
    def delete(self, entity_id: str) -> Optional[T]:
        """Remove the entity with this id and return it, or None if absent."""


class ContextRepository(Repository[T]):
    """
    Repository backed by a Context. One instance serves exactly one context.
    """

    def __init__(self, context: Context[T]) -> None:
        self._context = context

    @property
    def context(self) -> Context[T]:
        return self._context

    def _index_of(self, entity_id: str) -> Optional[int]:
        for idx, entity in enumerate(self._context.entities):
            if entity.id == entity_id:
                return idx
        return None

    def get(self, entity_id: str) -> Optional[T]:
        idx = self._index_of(entity_id)
        return None if idx is None else self._context.entities[idx]

    def get_all(self) -> List[T]:
        return list(self._context.entities)

    def insert(self, entity: T) -> Optional[T]:
        existing = self.get(entity.id)
        if existing is not None:
            return existing
        self._context.entities.append(entity)
        return None

    def update(self, entity: T) -> Optional[T]:
        idx = self._index_of(entity.id)
        if idx is None:
            return None
        previous = self._context.entities[idx]
        self._context.entities[idx] = entity
        return previous

    def upsert(self, entity: T) -> Optional[T]:
        previous = self.update(entity)
        if previous is not None:
            return previous
        self._context.entities.append(entity)
        return None

    def delete(self, entity_id: str) -> Optional[T]:
        idx = self._index_of(entity_id)
        if idx is None:
            return None
        return self._context.entities.pop(idx)
