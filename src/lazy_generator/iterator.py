"""Begin/end style iterator over a generator's shared stream."""

from typing import TypeVar

from .errors import check
from .handles import WeakGeneratorHandle

T = TypeVar("T")


class GeneratorIterator(WeakGeneratorHandle[T]):
    """
    Position in a generator's stream.

    Only weakly references the stream, so an iterator never keeps a
    producer alive. Every iterator over the same generator is a view of one
    shared stream: advancing any of them advances all of them. An exhausted
    or orphaned iterator compares equal to ``Generator.end()``.
    """

    def _position(self):
        state = self._resolve()
        if state is None or state.is_done():
            return None
        return state

    def __bool__(self) -> bool:
        return self._position() is not None

    def __repr__(self) -> str:
        state = self._position()
        if state is None:
            return "<GeneratorIterator end>"
        return f"<GeneratorIterator {state.name}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeneratorIterator):
            return NotImplemented
        return self._position() is other._position()

    __hash__ = None

    def advance(self) -> "GeneratorIterator[T]":
        """
        Step the shared stream to its next value.

        Returns:
            This iterator, equal to ``Generator.end()`` once the stream is done

        Raises:
            GeneratorMisuseError: If the iterator is already at the end
            Exception: The producer's own failure, re-raised once
        """
        check(bool(self), "Attempted to advance an invalid iterator")
        pinned = self.pin()
        if not pinned._state.resume():
            self._ref = None
            pinned._state.raise_if_failed()
        return self

    @property
    def value(self) -> T:
        """The stream's current value, valid until the next advance."""
        check(bool(self), "Attempted to dereference an invalid iterator")
        return self.pin().current_value
