"""
Id Sequence - Explicit sequential identifier generator.

Each registry owns one sequence. Identifiers are handed out only after the
entity they belong to has been built successfully, so a rejected
construction never burns a number.
"""
from typing import Callable, TypeVar

T = TypeVar('T')


class IdSequence:
    """
    Monotonic integer sequence.

    Attributes:
        start: First value issued (and the value restored by reset())
    """

    def __init__(self, start: int = 1):
        self.start = start
        self._next = start

    def peek(self) -> int:
        """Value that the next allocation will receive."""
        return self._next

    def allocate(self, factory: Callable[[int], T]) -> T:
        """
        Build an entity with the next id and advance the sequence.

        Args:
            factory: Callable receiving the id and returning the entity.
                If it raises, the sequence is left untouched.

        Returns:
            Whatever the factory returned
        """
        entity = factory(self._next)
        self._next += 1
        return entity

    def reset(self) -> None:
        """Restart the sequence from its initial value."""
        self._next = self.start

    def __repr__(self) -> str:
        return f"IdSequence(start={self.start}, next={self._next})"
