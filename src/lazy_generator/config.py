"""Configuration management for the library and the demo pipeline.

Settings are read from the process environment only. Loading a `.env` file
is left to the application; the demo entry point does it in `main()`.
"""

import os
from dataclasses import dataclass

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUE_VALUES


@dataclass
class GeneratorConfig:
    """Generator behaviour configuration."""

    propagate_failures: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Load generator configuration from environment variables.

        - LAZY_GENERATOR_PROPAGATE_FAILURES: re-raise producer failures to
          consumers (default true). When false, a failing producer simply
          reports completion.
        - LAZY_GENERATOR_LOG_LEVEL: log level used by the demo entry point
        """
        return cls(
            propagate_failures=_env_flag("LAZY_GENERATOR_PROPAGATE_FAILURES", "true"),
            log_level=os.getenv("LAZY_GENERATOR_LOG_LEVEL", "INFO").upper(),
        )


def get_generator_config() -> GeneratorConfig:
    """Get generator configuration."""
    return GeneratorConfig.from_env()
