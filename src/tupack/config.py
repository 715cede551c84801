"""Codec configuration.

The codec itself is stateless; the only knobs are an optional upper bound on
the size of packed tuples and the maximum nesting depth accepted on both
encode and decode.
Settings can be supplied explicitly or loaded from ``TUPACK_*`` environment
variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# Largest key accepted by the store
DEFAULT_KEY_SIZE_LIMIT = 10_000


@dataclass(frozen=True)
class TupackConfig:
    """Tuple codec configuration.

    Attributes:
        max_key_size: Largest packed tuple, in bytes, that TupleWriter.pack() will
            produce, or None for no limit (default). The store itself rejects keys
            above 10,000 bytes (DEFAULT_KEY_SIZE_LIMIT).
        max_depth: Maximum nesting depth of embedded tuples (default 32). Deeper
            values are rejected with ArgumentError when packing and FormatError
            when unpacking.

    Examples:
        ```python
        from tupack import DEFAULT_KEY_SIZE_LIMIT, TupackConfig, TupleWriter

        writer = TupleWriter(config=TupackConfig(max_key_size=DEFAULT_KEY_SIZE_LIMIT))
        ```
    """

    max_key_size: Optional[int] = None
    max_depth: int = 32

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_key_size is not None and self.max_key_size < 1:
            raise ValueError(f"max_key_size must be >= 1, got {self.max_key_size}")

        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")

    @classmethod
    def from_env(cls) -> TupackConfig:
        """Load configuration from environment variables.

        Unparseable values are ignored (with a warning) and the default is kept.
        """
        defaults = cls()
        return cls(
            max_key_size=_int_from_env("TUPACK_MAX_KEY_SIZE", defaults.max_key_size),
            max_depth=_int_from_env("TUPACK_MAX_DEPTH", defaults.max_depth),
        )


def _int_from_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid value %r for %s, using %s", raw, name, default)
        return default


_default_config = TupackConfig()


def get_config() -> TupackConfig:
    """Return the process-wide default configuration."""
    return _default_config


def set_config(config: TupackConfig) -> None:
    """Replace the process-wide default configuration."""
    global _default_config
    logger.debug("tupack configuration set to %r", config)
    _default_config = config
