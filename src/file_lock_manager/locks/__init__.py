"""Locking subsystem for cross-process coordination on a single file.

``LockHandle`` carries the acquire/release state machine; backends wrap
the OS advisory locking primitive it drives.
"""

from file_lock_manager.locks.backends import (
    FcntlFlockBackend,
    LockBackend,
    LockMode,
    MsvcrtLockBackend,
    create_lock_backend,
)
from file_lock_manager.locks.backoff import iter_waits, next_wait
from file_lock_manager.locks.handle import LockHandle

__all__ = [
    "FcntlFlockBackend",
    "LockBackend",
    "LockHandle",
    "LockMode",
    "MsvcrtLockBackend",
    "create_lock_backend",
    "iter_waits",
    "next_wait",
]
