"""Owning and non-owning handles to a producer's shared state."""

import functools
import inspect
import logging
import weakref
from typing import TYPE_CHECKING, Any, Callable, Generic, Iterator, Optional, TypeVar

from .config import get_generator_config
from .errors import ProducerDefinitionError, check
from .state import ProductionState

if TYPE_CHECKING:
    from .iterator import GeneratorIterator

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _producer_name(producer: Callable) -> str:
    return getattr(producer, "__qualname__", None) or repr(producer)


def validate_producer(producer: Callable) -> None:
    """
    Reject producers that could suspend on anything other than ``yield``.

    Args:
        producer: Candidate producer callable

    Raises:
        ProducerDefinitionError: If producer is a coroutine function, an async
            generator function, a ``types.coroutine`` function or not a
            generator function at all
    """
    name = _producer_name(producer)
    if inspect.iscoroutinefunction(producer) or inspect.isasyncgenfunction(producer):
        raise ProducerDefinitionError(
            f"Producer {name} is asynchronous; only yield-based producers are supported"
        )
    if not inspect.isgeneratorfunction(producer):
        raise ProducerDefinitionError(f"Producer {name} is not a generator function")

    func = producer
    while isinstance(func, functools.partial):
        func = func.func
    func = getattr(func, "__func__", func)
    code = getattr(func, "__code__", None)
    if code is not None and code.co_flags & inspect.CO_ITERABLE_COROUTINE:
        raise ProducerDefinitionError(
            f"Producer {name} is a generator-based coroutine and may await"
        )


class Generator(Generic[T]):
    """
    Owning handle to a lazily evaluated stream of values.

    The producer is a generator function; nothing in its body runs until the
    first ``advance()`` or ``begin()``. Handles returned by ``share()`` or
    ``WeakGeneratorHandle.pin()`` alias the same stream. Once the last owning
    handle is gone the producer is closed at its current yield, so its
    ``finally`` blocks and context managers run.

    Example:
        def countdown(n):
            while n:
                yield n
                n -= 1

        list(Generator(countdown, 3))  # [3, 2, 1]
    """

    def __init__(self, producer: Optional[Callable[..., Iterator[T]]] = None, /, *args, **kwargs):
        """
        Initialize generator.

        Args:
            producer: Generator function, or None for an empty handle
            *args: Positional arguments for the producer
            **kwargs: Keyword arguments for the producer
        """
        self._state: Optional[ProductionState] = None
        if producer is not None:
            validate_producer(producer)
            self._state = _create_state(producer, args, kwargs, None)

    @classmethod
    def _adopt(cls, state: Optional[ProductionState]) -> "Generator[T]":
        handle = cls()
        handle._state = state
        return handle

    def __repr__(self) -> str:
        if self._state is None:
            return "<Generator empty>"
        return f"<Generator {self._state.name} {self._state.status.value}>"

    def __bool__(self) -> bool:
        return self._state is not None

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and release ownership."""
        self.release()

    def __copy__(self) -> "Generator[T]":
        return self.share()

    def __iter__(self) -> Iterator[T]:
        iterator = self.begin()
        while iterator != self.end():
            yield iterator.value
            iterator.advance()

    def _require_state(self) -> ProductionState:
        check(self._state is not None, "Attempted to access an empty generator")
        return self._state

    @property
    def current_value(self) -> T:
        """The most recently yielded value, valid until the next advance."""
        state = self._require_state()
        check(state.has_value(), f"Generator {state.name} has no current value")
        return state.current_value

    def current_value_or(self, default: Any = None) -> Any:
        """
        Get the current value without failing.

        Args:
            default: Returned when no value is available

        Returns:
            The current value, or default
        """
        if self._state is None or not self._state.has_value():
            return default
        return self._state.current_value

    def has_value(self) -> bool:
        """Check whether a yielded value is currently available."""
        return self._require_state().has_value()

    def is_done(self) -> bool:
        """Check whether the producer has finished execution."""
        return self._require_state().is_done()

    def advance(self) -> bool:
        """
        Resume the producer up to its next yield.

        Returns:
            True if a new value is available, False once the producer is done

        Raises:
            Exception: The producer's own failure, re-raised once
        """
        state = self._require_state()
        result = state.resume()
        state.raise_if_failed()
        return result

    def begin(self) -> "GeneratorIterator[T]":
        """
        Get an iterator positioned on the current value.

        Primes the producer if it has not produced a value yet.

        Raises:
            Exception: The producer's own failure, re-raised once
        """
        from .iterator import GeneratorIterator

        state = self._require_state()
        if not state.has_value():
            state.resume()
        state.raise_if_failed()
        if state.is_done():
            return GeneratorIterator()
        return GeneratorIterator(self)

    @staticmethod
    def end() -> "GeneratorIterator[Any]":
        """Get the terminal iterator shared by every generator."""
        from .iterator import GeneratorIterator

        return GeneratorIterator()

    def create_iterator(self) -> "GeneratorIterator[T]":
        """Alias of begin()."""
        return self.begin()

    def get_weak_handle(self) -> "WeakGeneratorHandle[T]":
        """Get a handle that observes the stream without keeping it alive."""
        return WeakGeneratorHandle(self)

    def share(self) -> "Generator[T]":
        """Get another owning handle to the same stream."""
        return Generator._adopt(self._state)

    def release(self) -> None:
        """Drop this handle's ownership; the last owner tears the producer down."""
        self._state = None


class WeakGeneratorHandle(Generic[T]):
    """Non-owning reference to a generator's stream."""

    def __init__(self, generator: Optional[Generator[T]] = None):
        """
        Initialize weak handle.

        Args:
            generator: Generator to observe, or None for an empty handle
        """
        self._ref: Optional[weakref.ref] = None
        if generator is not None and generator._state is not None:
            self._ref = weakref.ref(generator._state)

    def _resolve(self) -> Optional[ProductionState]:
        return self._ref() if self._ref is not None else None

    def __bool__(self) -> bool:
        return self._resolve() is not None

    def pin(self) -> Generator[T]:
        """
        Get a temporary owning handle.

        Returns:
            A Generator sharing the stream, or an empty Generator once no
            owning handle exists anymore
        """
        return Generator._adopt(self._resolve())


def generator(func: Optional[Callable] = None, *, propagate_failures: Optional[bool] = None):
    """
    Turn a generator function into a factory of ``Generator`` handles.

    Can be used bare (``@generator``) or with options
    (``@generator(propagate_failures=False)``). The producer is validated
    when decorated.

    Args:
        func: Generator function to wrap
        propagate_failures: Override the configured failure propagation flag
    """

    def decorate(producer: Callable) -> Callable[..., Generator]:
        validate_producer(producer)

        @functools.wraps(producer)
        def factory(*args, **kwargs) -> Generator:
            return Generator._adopt(_create_state(producer, args, kwargs, propagate_failures))

        return factory

    if func is not None:
        return decorate(func)
    return decorate


def _create_state(
    producer: Callable,
    args: tuple,
    kwargs: dict,
    propagate_failures: Optional[bool],
) -> ProductionState:
    if propagate_failures is None:
        propagate_failures = get_generator_config().propagate_failures

    name = _producer_name(producer)
    logger.debug(f"Creating generator for producer {name}")
    # Calling a generator function binds its arguments without running the body.
    return ProductionState(producer(*args, **kwargs), name, propagate_failures)
