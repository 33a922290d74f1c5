"""
Base Repository - In-memory repository pattern implementation.

Provides common lookup operations for id-keyed entities. Each repository
owns the entities it stores and the sequence that numbers them.
"""
from abc import ABC, abstractmethod
from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar

from jobsite.domain.sequence import IdSequence

T = TypeVar('T')


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository keeping entities in registration order.

    Type Parameters:
        T: The entity type this repository manages
    """

    def __init__(self, sequence: Optional[IdSequence] = None):
        """
        Initialize the repository.

        Args:
            sequence: Id generator for new entities (a fresh one starting
                at 1 when omitted)
        """
        self.sequence = sequence or IdSequence()
        self._items: Dict[int, T] = {}

    @abstractmethod
    def _key(self, entity: T) -> int:
        """Identifier of an entity."""

    @abstractmethod
    def _not_found(self, entity_id: int) -> Exception:
        """Exception raised by require() for an unknown id."""

    def _create(self, factory: Callable[[int], T]) -> T:
        """Build an entity with the next id and store it."""
        entity = self.sequence.allocate(factory)
        self._items[self._key(entity)] = entity
        return entity

    def get_by_id(self, entity_id: int) -> Optional[T]:
        """
        Retrieve an entity by its identifier.

        Args:
            entity_id: Identifier value

        Returns:
            The entity if found, None otherwise
        """
        return self._items.get(entity_id)

    def require(self, entity_id: int) -> T:
        """
        Retrieve an entity or raise the repository's not-found error.

        Args:
            entity_id: Identifier value

        Returns:
            The entity
        """
        entity = self._items.get(entity_id)
        if entity is None:
            raise self._not_found(entity_id)
        return entity

    def get_all(self) -> List[T]:
        """All entities in registration order."""
        return list(self._items.values())

    def filter(self, predicate: Callable[[T], bool]) -> List[T]:
        """Entities matching a predicate, in registration order."""
        return [e for e in self._items.values() if predicate(e)]

    def count(self) -> int:
        return len(self._items)

    def clear(self) -> None:
        """Drop every entity and restart the id sequence."""
        self._items.clear()
        self.sequence.reset()

    def __contains__(self, entity_id: int) -> bool:
        return entity_id in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)
