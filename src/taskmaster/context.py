from __future__ import annotations

from typing import Generic, Iterable, Iterator, List, Optional, Protocol, TypeVar


class Identifiable(Protocol):
    """Any record addressed by a string id."""

    @property
    def id(self) -> str: ...


T = TypeVar("T", bound=Identifiable)


# PUBLIC_INTERFACE
class Context(Generic[T]):
    """
    In-memory working set for one entity type.

    Entities keep their insertion order. The collection is replaced
    wholesale on load and flushed wholesale on save; in between it is only
    mutated through a repository.
    """

    def __init__(self, entities: Optional[Iterable[T]] = None) -> None:
        self.entities: List[T] = list(entities) if entities is not None else []

    def replace(self, entities: Iterable[T]) -> None:
        self.entities = list(entities)

    def clear(self) -> None:
        self.entities = []

    def __len__(self) -> int:
        return len(self.entities)

    def __iter__(self) -> Iterator[T]:
        return iter(self.entities)
