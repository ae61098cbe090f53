"""Exception types and the fail-fast precondition check."""

import logging

logger = logging.getLogger(__name__)


class LazyGeneratorError(Exception):
    """Base class for errors raised by lazy_generator itself."""


class GeneratorMisuseError(LazyGeneratorError, RuntimeError):
    """
    A precondition of the generator protocol was violated.

    Raised for programming errors such as dereferencing an exhausted iterator
    or reading a value before the producer emitted one. It is never captured
    as a producer failure and is not meant to be recovered from.
    """


class ProducerDefinitionError(LazyGeneratorError, TypeError):
    """The producer is not a plain, value-yielding generator function."""


def check(condition: bool, message: str) -> None:
    """
    Fail fast when a precondition does not hold.

    Args:
        condition: Precondition that must be true
        message: Diagnostic describing the violation

    Raises:
        GeneratorMisuseError: If condition is false
    """
    if not condition:
        logger.critical(message)
        raise GeneratorMisuseError(message)
