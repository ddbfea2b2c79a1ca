"""
pyclj.config - Runtime configuration

This module holds the few knobs that change how pyclj renders values.
It provides the RuntimeConfig class and a process-wide active instance.

Settings can come from the environment:
    PYCLJ_REPR_LENGTH=20    # elements shown by repr() of a lazy sequence
    PYCLJ_PRINT_LENGTH=100  # truncate lazy sequences in pr_str
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

# Default configuration values
DEFAULT_REPR_LENGTH = 10
DEFAULT_PRINT_LENGTH: Optional[int] = None
ENV_REPR_LENGTH = "PYCLJ_REPR_LENGTH"
ENV_PRINT_LENGTH = "PYCLJ_PRINT_LENGTH"


def _parse_length(environ: Mapping[str, str], name: str) -> Optional[int]:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


@dataclass
class RuntimeConfig:
    """
    Rendering settings for pyclj values.

    Fields:
        repr_length: Number of elements repr() shows for a LazySeq before
                     eliding the rest with "..."
        print_length: Maximum number of elements pr_str renders for a
                      LazySeq, or None for no limit. Infinite sequences
                      need a limit to print at all.
    """

    repr_length: int = DEFAULT_REPR_LENGTH
    print_length: Optional[int] = DEFAULT_PRINT_LENGTH

    def __post_init__(self):
        if self.repr_length < 0:
            raise ValueError(
                f"repr_length must not be negative, got {self.repr_length}"
            )
        if self.print_length is not None and self.print_length < 0:
            raise ValueError(
                f"print_length must not be negative, got {self.print_length}"
            )

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None) -> "RuntimeConfig":
        """
        Build a RuntimeConfig from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Loaded RuntimeConfig instance, with defaults for unset variables.

        Raises:
            ValueError: If a variable is set to a non-integer or negative value.
        """
        if environ is None:
            environ = os.environ

        repr_length = _parse_length(environ, ENV_REPR_LENGTH)
        print_length = _parse_length(environ, ENV_PRINT_LENGTH)

        config = cls(
            repr_length=DEFAULT_REPR_LENGTH if repr_length is None else repr_length,
            print_length=print_length,
        )
        logger.debug("Loaded runtime config: %s", config)
        return config


_active: Optional[RuntimeConfig] = None


def get_config() -> RuntimeConfig:
    """Return the active config, loading it from the environment on first use."""
    global _active
    if _active is None:
        _active = RuntimeConfig.load()
    return _active


def set_config(config: Optional[RuntimeConfig]) -> None:
    """Replace the active config. Passing None reloads from the environment on next use."""
    global _active
    _active = config


__all__ = [
    "RuntimeConfig",
    "get_config",
    "set_config",
    "DEFAULT_REPR_LENGTH",
    "DEFAULT_PRINT_LENGTH",
]
