"""Core module - Foundation components with no internal dependencies.

This module provides the basic building blocks used by the lock handles:
- Version information
- Custom exceptions
- Configuration dataclasses and environment overrides
- Constants and defaults
- Logging helpers
"""

from file_lock_manager.core.version import __version__

from file_lock_manager.core.exceptions import (
    FileLockError,
    InvalidLockArgumentError,
    LockFileNotFoundError,
    LockError,
    LockContendedError,
    LockTimeoutError,
    UnlockError,
    LockHandleClosedError,
    LockBackendUnavailableError,
)

from file_lock_manager.core.config import (
    BackoffConfig,
    LogConfig,
    LockConfig,
)

from file_lock_manager.core.constants import (
    DEFAULT_BACKOFF,
    DEFAULT_LOG,
    DEFAULT_LOCK,
    LOGGER_NAME,
)

from file_lock_manager.core.env import (
    bootstrap_dotenv,
    effective_backoff_config,
    effective_lock_config,
)

from file_lock_manager.core.logging import (
    JSONFormatter,
    ContextLoggerAdapter,
    setup_logging,
    with_log_context,
)

__all__ = [
    # Version
    '__version__',
    # Exceptions
    'FileLockError',
    'InvalidLockArgumentError',
    'LockFileNotFoundError',
    'LockError',
    'LockContendedError',
    'LockTimeoutError',
    'UnlockError',
    'LockHandleClosedError',
    'LockBackendUnavailableError',
    # Config dataclasses
    'BackoffConfig',
    'LogConfig',
    'LockConfig',
    # Constants
    'DEFAULT_BACKOFF',
    'DEFAULT_LOG',
    'DEFAULT_LOCK',
    'LOGGER_NAME',
    # Environment
    'bootstrap_dotenv',
    'effective_backoff_config',
    'effective_lock_config',
    # Logging
    'JSONFormatter',
    'ContextLoggerAdapter',
    'setup_logging',
    'with_log_context',
]
