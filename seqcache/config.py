"""Cache configuration loaded from YAML params files.

A params file either holds the settings at the top level::

    min_query_size: 50000
    max_intervals: 20

or nests them under a ``sequence_cache`` key so they can share a file with the
settings of the surrounding application.
"""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from seqcache import (
    DEFAULT_MAX_INTERVALS,
    DEFAULT_MIN_QUERY_SIZE,
    DEFAULT_VIEWPORT_CHECK_LIMIT,
)
from seqcache.errors import ConfigError
from seqcache.utils.logging import get_logger

CONFIG_ENV_VAR = "SEQCACHE_CONFIG"
CONFIG_SECTION = "sequence_cache"

logger = get_logger("config")


@dataclasses.dataclass(frozen=True)
class CacheConfig:
    """Tunable limits of a ``SequenceCache``.

    Attributes:
        min_query_size: Minimum number of bases fetched on a cache miss
        max_intervals: Maximum number of intervals kept in the cache
        viewport_check_limit: Visibility pruning is skipped when at least this
                              many viewports are tracked
    """

    min_query_size: int = DEFAULT_MIN_QUERY_SIZE
    max_intervals: int = DEFAULT_MAX_INTERVALS
    viewport_check_limit: int = DEFAULT_VIEWPORT_CHECK_LIMIT

    def __post_init__(self) -> None:
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{field.name} must be an integer, got {value!r}")
            if value <= 0:
                raise ConfigError(f"{field.name} must be positive, got {value}")

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> "CacheConfig":
        if isinstance(params, dict) and CONFIG_SECTION in params:
            params = params[CONFIG_SECTION] or {}
        if not isinstance(params, dict):
            raise ConfigError(f"Expected a mapping of cache settings, got {type(params).__name__}")

        known = {field.name for field in dataclasses.fields(cls)}
        unknown = sorted(set(params) - known)
        if unknown:
            raise ConfigError(f"Unknown cache settings: {', '.join(unknown)}")
        return cls(**params)


def load_config(config_file: Optional[Union[Path, str]] = None) -> CacheConfig:
    """Load cache settings from a YAML params file.

    Args:
        config_file: Path to the YAML file. When omitted, the file named by the
                     SEQCACHE_CONFIG environment variable is used, and if that
                     is unset too the defaults are returned.

    Returns:
        CacheConfig: The validated configuration

    Raises:
        FileNotFoundError: If the config file does not exist
        ConfigError: If the file is not valid YAML or holds invalid settings
    """
    if config_file is None:
        config_file = os.environ.get(CONFIG_ENV_VAR)
        if not config_file:
            return CacheConfig()

    config_path = Path(config_file).expanduser().resolve()
    logger.debug(f"Loading cache config from: {config_path}")

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            params = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing config {config_path}: {e}") from e

    return CacheConfig.from_dict(params or {})
