"""Constants and default values for file-lock-manager.

This module centralizes environment variable names, backend names and
default configuration instances used throughout the package.
"""

from file_lock_manager.core.config import BackoffConfig, LockConfig, LogConfig

# ==================== ENVIRONMENT VARIABLES ====================

ENV_LOCK_BACKEND: str = "FILE_LOCK_BACKEND"
ENV_LOG_LEVEL: str = "FILE_LOCK_LOG_LEVEL"
ENV_LOG_FORMAT: str = "FILE_LOCK_LOG_FORMAT"
ENV_BACKOFF_INITIAL: str = "FILE_LOCK_BACKOFF_INITIAL"
ENV_BACKOFF_MAX: str = "FILE_LOCK_BACKOFF_MAX"
ENV_BACKOFF_MULTIPLIER: str = "FILE_LOCK_BACKOFF_MULTIPLIER"
ENV_BACKOFF_JITTER: str = "FILE_LOCK_BACKOFF_JITTER"

# ==================== BACKENDS ====================

BACKEND_AUTO: str = "auto"
BACKEND_FCNTL: str = "fcntl"
BACKEND_MSVCRT: str = "msvcrt"
KNOWN_BACKENDS: frozenset[str] = frozenset({BACKEND_AUTO, BACKEND_FCNTL, BACKEND_MSVCRT})

# Poll interval used by backends whose primitive cannot block natively
NATIVE_POLL_INTERVAL_SECONDS: float = 0.05

# ==================== LOGGING ====================

LOGGER_NAME: str = "file_lock_manager"
VALID_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_LOG_FORMATS: tuple[str, ...] = ("text", "json")

# ==================== DEFAULT CONFIG INSTANCES ====================

DEFAULT_BACKOFF = BackoffConfig()
DEFAULT_LOG = LogConfig()
DEFAULT_LOCK = LockConfig()
