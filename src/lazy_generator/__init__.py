"""Lazy Generator - Pull values one at a time from suspendable producers."""

__version__ = "0.1.0"

from .errors import GeneratorMisuseError, LazyGeneratorError, ProducerDefinitionError
from .handles import Generator, WeakGeneratorHandle, generator, validate_producer
from .iterator import GeneratorIterator
from .state import ProductionState, ProductionStatus

__all__ = [
    # Errors
    "LazyGeneratorError",
    "GeneratorMisuseError",
    "ProducerDefinitionError",
    # State
    "ProductionState",
    "ProductionStatus",
    # Handles
    "Generator",
    "WeakGeneratorHandle",
    "GeneratorIterator",
    "generator",
    "validate_producer",
]
