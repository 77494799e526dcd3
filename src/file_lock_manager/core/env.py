"""Environment-driven configuration for file-lock-manager.

Values set in the process environment (optionally seeded from a ``.env``
file through python-dotenv) override the dataclass defaults. Invalid
values are ignored with a warning rather than failing the caller.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from file_lock_manager.core.config import BackoffConfig, LockConfig, LogConfig
from file_lock_manager.core.constants import (
    BACKEND_AUTO,
    DEFAULT_BACKOFF,
    DEFAULT_LOG,
    ENV_BACKOFF_INITIAL,
    ENV_BACKOFF_JITTER,
    ENV_BACKOFF_MAX,
    ENV_BACKOFF_MULTIPLIER,
    ENV_LOCK_BACKEND,
    ENV_LOG_FORMAT,
    ENV_LOG_LEVEL,
)


def bootstrap_dotenv(dotenv_path: str | Path | None = None, logger: logging.Logger | None = None) -> bool:
    """Load variables from a .env file without overriding the environment.

    Args:
        dotenv_path: Explicit .env file. When omitted the file is searched
            upwards from the current working directory.
        logger: Logger for diagnostics

    Returns:
        True if a file was found and loaded
    """
    log = logger or logging.getLogger(__name__)
    path = str(dotenv_path) if dotenv_path is not None else find_dotenv(usecwd=True)
    if not path:
        log.debug(".env file not found")
        return False
    try:
        loaded = load_dotenv(path, override=False)
    except OSError as e:
        log.debug(f"Failed to load .env from {path}: {e}")
        return False
    if loaded:
        log.debug(f"Loaded environment from {path}")
    return loaded


def _parse_env_numeric(value: str | None, cast: Callable[[str], Any]) -> Any | None:
    """Parse an environment value, returning None when invalid."""
    if value is None:
        return None
    try:
        parsed = cast(value)
    except (TypeError, ValueError):
        return None
    if isinstance(parsed, float) and not math.isfinite(parsed):
        return None
    return parsed


def _env_float(name: str, default: float, minimum: float, logger: logging.Logger) -> float:
    raw = os.environ.get(name)
    parsed = _parse_env_numeric(raw, float)
    if parsed is not None and parsed >= minimum:
        return parsed
    if raw is not None:
        logger.warning(f"Ignoring invalid {name}={raw!r}; using default {default}")
    return default


def effective_backoff_config(base: BackoffConfig | None = None) -> BackoffConfig:
    """Return backoff config with env-var overrides applied."""
    logger = logging.getLogger(__name__)
    cfg = base or DEFAULT_BACKOFF

    initial_delay = _env_float(ENV_BACKOFF_INITIAL, cfg.initial_delay, 0.0, logger)
    max_delay = _env_float(ENV_BACKOFF_MAX, cfg.max_delay, 0.0, logger)
    multiplier = _env_float(ENV_BACKOFF_MULTIPLIER, cfg.multiplier, 1.0, logger)
    jitter = _env_float(ENV_BACKOFF_JITTER, cfg.jitter, 0.0, logger)

    # A ceiling below the starting wait would shrink every retry.
    if max_delay < initial_delay:
        logger.warning(
            f"Ignoring invalid backoff window (max_delay={max_delay} < initial_delay={initial_delay}); "
            f"using max_delay={initial_delay}"
        )
        max_delay = initial_delay

    return BackoffConfig(
        initial_delay=initial_delay,
        max_delay=max_delay,
        multiplier=multiplier,
        jitter=jitter,
    )


def requested_backend_name(backend_name: str | None = None) -> str:
    """Resolve the backend name: explicit value, then env var, then auto."""
    return (backend_name or os.environ.get(ENV_LOCK_BACKEND) or BACKEND_AUTO).strip().lower()


def effective_log_config() -> LogConfig:
    """Return log config from env vars, falling back to defaults."""
    return LogConfig(
        level=os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG.level),
        format=os.environ.get(ENV_LOG_FORMAT, DEFAULT_LOG.format),
    )


def effective_lock_config(dotenv_path: str | Path | None = None, *, load_env_file: bool = False) -> LockConfig:
    """Build a LockConfig from the environment.

    Args:
        dotenv_path: Explicit .env file to load first
        load_env_file: Search for and load a .env file even without a path
    """
    if dotenv_path is not None or load_env_file:
        bootstrap_dotenv(dotenv_path)
    return LockConfig(
        backend=requested_backend_name(),
        backoff=effective_backoff_config(),
    )
