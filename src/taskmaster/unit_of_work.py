from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Generic, List, Optional

from .context import Context, T
from .errors import NotConfiguredError
from .repositories import ContextRepository

logger = logging.getLogger(__name__)


class StoreState(str, Enum):
    unconfigured = "unconfigured"
    configured = "configured"
    loaded = "loaded"
    mutated = "mutated"
    saved = "saved"


# PUBLIC_INTERFACE
class UnitOfWork(ABC, Generic[T]):
    """
    Binds a ContextRepository to a durable backend.

    Lifecycle: configure() -> load() -> CRUD ... -> save(). CRUD calls only
    touch the in-memory context; nothing is durable until save().

    Subclasses implement the storage hooks:
    - _resolve_location(name, connection_url): where the data lives
    - _prepare(location): create directories/schema; must be safe to repeat
    - _read(): every persisted entity in stored order
    - _write(entities): replace the persisted set with `entities`
    """

    backend_name: str = "abstract"

    def __init__(self, context: Optional[Context[T]] = None) -> None:
        self.context: Context[T] = context if context is not None else Context()
        self.repository: ContextRepository[T] = ContextRepository(self.context)
        self.location: Optional[Path] = None
        self.state = StoreState.unconfigured

    @abstractmethod
    def _resolve_location(self, name: str, connection_url: str) -> Path: ...

    @abstractmethod
    def _prepare(self, location: Path) -> None: ...

    @abstractmethod
    def _read(self) -> List[T]: ...

    @abstractmethod
    def _write(self, entities: List[T]) -> None: ...

    def _require_configured(self) -> None:
        if self.state is StoreState.unconfigured:
            raise NotConfiguredError(f"{self.backend_name} store is not configured; call configure() first")

    def _require_loaded(self) -> None:
        self._require_configured()
        if self.state is StoreState.configured:
            raise NotConfiguredError(f"{self.backend_name} store is not loaded; call load() first")

    # PUBLIC_INTERFACE
    def configure(self, name: str, connection_url: str) -> Path:
        """
        Point the unit of work at its storage and create that storage if
        needed. Repeating the call with the same location changes nothing.
        Switching to another location drops the in-memory context.

        Returns:
            The resolved storage path.
        Raises:
            StorageError if the storage cannot be created.
        """
        location = self._resolve_location(name, connection_url)
        if self.location == location:
            logger.debug("%s store already configured at %s", self.backend_name, location)
            return location

        self._prepare(location)
        if self.location is not None:
            logger.info("%s store moved from %s to %s; context cleared", self.backend_name, self.location, location)
            self.context.clear()
        self.location = location
        self.state = StoreState.configured
        logger.info("%s store configured at %s", self.backend_name, location)
        return location

    # PUBLIC_INTERFACE
    def load(self) -> List[T]:
        """Replace the context with the persisted entities and return them."""
        self._require_configured()
        entities = self._read()
        self.context.replace(entities)
        self.state = StoreState.loaded
        logger.info("%s store loaded %d entities from %s", self.backend_name, len(entities), self.location)
        return self.repository.get_all()

    # PUBLIC_INTERFACE
    def save(self) -> None:
        """Persist the whole context, replacing what was stored before."""
        self._require_loaded()
        entities = self.repository.get_all()
        self._write(entities)
        self.state = StoreState.saved
        logger.info("%s store saved %d entities to %s", self.backend_name, len(entities), self.location)

    def _mark(self, changed: bool) -> None:
        if changed:
            self.state = StoreState.mutated

    def get(self, entity_id: str) -> Optional[T]:
        self._require_loaded()
        return self.repository.get(entity_id)

    def get_all(self) -> List[T]:
        self._require_loaded()
        return self.repository.get_all()

    def insert(self, entity: T) -> Optional[T]:
        self._require_loaded()
        existing = self.repository.insert(entity)
        self._mark(existing is None)
        return existing

    def update(self, entity: T) -> Optional[T]:
        self._require_loaded()
        previous = self.repository.update(entity)
        self._mark(previous is not None)
        return previous

    def upsert(self, entity: T) -> Optional[T]:
        self._require_loaded()
        previous = self.repository.upsert(entity)
        self._mark(True)
        return previous

    def delete(self, entity_id: str) -> Optional[T]:
        self._require_loaded()
        removed = self.repository.delete(entity_id)
        self._mark(removed is not None)
        return removed
