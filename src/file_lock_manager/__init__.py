"""
file-lock-manager - Cooperative advisory file locking

Coordinates access to a single file across independent processes or
threads through the operating system's whole-file advisory lock, with
blocking, non-blocking and timeout-bounded acquisition in exclusive or
shared mode.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

__all__ = [
    "__version__",
    "LockHandle",
    "LockMode",
    "BackoffConfig",
    "LockConfig",
    "FileLockError",
    "InvalidLockArgumentError",
    "LockFileNotFoundError",
    "LockError",
    "LockContendedError",
    "LockTimeoutError",
    "UnlockError",
    "LockHandleClosedError",
    "setup_logging",
]

_EXPORTS = {
    "__version__": "file_lock_manager.core.version",
    "LockHandle": "file_lock_manager.locks.handle",
    "LockMode": "file_lock_manager.locks.backends",
    "BackoffConfig": "file_lock_manager.core.config",
    "LockConfig": "file_lock_manager.core.config",
    "FileLockError": "file_lock_manager.core.exceptions",
    "InvalidLockArgumentError": "file_lock_manager.core.exceptions",
    "LockFileNotFoundError": "file_lock_manager.core.exceptions",
    "LockError": "file_lock_manager.core.exceptions",
    "LockContendedError": "file_lock_manager.core.exceptions",
    "LockTimeoutError": "file_lock_manager.core.exceptions",
    "UnlockError": "file_lock_manager.core.exceptions",
    "LockHandleClosedError": "file_lock_manager.core.exceptions",
    "setup_logging": "file_lock_manager.core.logging",
}

if TYPE_CHECKING:
    from file_lock_manager.core.config import BackoffConfig, LockConfig
    from file_lock_manager.core.exceptions import (
        FileLockError,
        InvalidLockArgumentError,
        LockContendedError,
        LockError,
        LockFileNotFoundError,
        LockHandleClosedError,
        LockTimeoutError,
        UnlockError,
    )
    from file_lock_manager.core.logging import setup_logging
    from file_lock_manager.core.version import __version__
    from file_lock_manager.locks.backends import LockMode
    from file_lock_manager.locks.handle import LockHandle

logging.getLogger(__name__).addHandler(logging.NullHandler())


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module = importlib.import_module(_EXPORTS[name])
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
