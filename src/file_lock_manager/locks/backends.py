"""Lock backend implementations.

Design principles:
- A backend is a thin wrapper over one OS advisory locking primitive and
  operates on raw file descriptors it opened itself.
- Contention on a non-blocking request is a normal ``False`` result; any
  other failure propagates as ``OSError``.
- Backends keep no state about who holds what. Bookkeeping lives in
  ``LockHandle``.
"""

from __future__ import annotations

import contextlib
import errno
import logging
import os
import time
from enum import Enum
from typing import Protocol

from file_lock_manager.core.constants import (
    BACKEND_AUTO,
    BACKEND_FCNTL,
    BACKEND_MSVCRT,
    KNOWN_BACKENDS,
    NATIVE_POLL_INTERVAL_SECONDS,
)
from file_lock_manager.core.env import requested_backend_name
from file_lock_manager.core.exceptions import LockBackendUnavailableError

try:
    import fcntl
except ImportError:  # pragma: no cover - exercised on non-POSIX only
    fcntl = None

try:
    import msvcrt
except ImportError:  # pragma: no cover - exercised on Windows only
    msvcrt = None

_CONTENTION_ERRNOS = {
    err_no
    for err_no in (
        errno.EAGAIN,
        errno.EWOULDBLOCK,
        errno.EACCES,
        getattr(errno, "EDEADLOCK", None),
    )
    if err_no is not None
}


class LockMode(Enum):
    """Whole-file advisory lock modes."""

    EXCLUSIVE = "exclusive"  # One holder, excludes shared and exclusive requesters
    SHARED = "shared"  # Many shared holders, excludes any exclusive holder


def is_contention_error(error: OSError) -> bool:
    """Whether an OSError from a non-blocking lock call means 'held elsewhere'."""
    return isinstance(error, BlockingIOError) or error.errno in _CONTENTION_ERRNOS


class LockBackend(Protocol):
    """Backend abstraction over an OS advisory locking primitive."""

    name: str
    supports_shared: bool

    def open(self, path: str, file_mode: int = 0o666) -> int:
        """Open ``path`` read/write, creating it empty if absent."""

    def acquire(self, fd: int, mode: LockMode, blocking: bool) -> bool:
        """Lock ``fd``. Returns False only for non-blocking contention."""

    def release(self, fd: int) -> None:
        """Drop whatever lock ``fd`` holds."""

    def close(self, fd: int) -> None:
        """Close ``fd``."""


class _DescriptorBackend:
    """Open/close shared by the descriptor-based backends."""

    name = ""
    supports_shared = False

    def open(self, path: str, file_mode: int = 0o666) -> int:
        # O_CREAT without O_TRUNC: existing content is left untouched.
        return os.open(path, os.O_RDWR | os.O_CREAT, file_mode)

    def close(self, fd: int) -> None:
        os.close(fd)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FcntlFlockBackend(_DescriptorBackend):
    """POSIX advisory locking backend backed by ``fcntl.flock``.

    flock locks belong to the open file description, so two descriptors
    opened separately on the same path contend even inside one process.
    Locking a descriptor that already holds a lock converts its mode.
    """

    name = BACKEND_FCNTL
    supports_shared = True

    @staticmethod
    def is_supported() -> bool:
        return fcntl is not None

    def acquire(self, fd: int, mode: LockMode, blocking: bool) -> bool:
        assert fcntl is not None  # For type checkers.
        operation = fcntl.LOCK_EX if mode is LockMode.EXCLUSIVE else fcntl.LOCK_SH
        if not blocking:
            operation |= fcntl.LOCK_NB

        try:
            fcntl.flock(fd, operation)
        except OSError as e:
            if not blocking and is_contention_error(e):
                return False
            raise
        return True

    def release(self, fd: int) -> None:
        assert fcntl is not None  # For type checkers.
        fcntl.flock(fd, fcntl.LOCK_UN)


class MsvcrtLockBackend(_DescriptorBackend):
    """Windows fallback backend backed by ``msvcrt.locking``.

    The primitive only offers exclusive locks and cannot wait indefinitely,
    so shared requests are taken exclusively and blocking requests poll.
    Byte 0 of the file serves as the lock region.
    """

    name = BACKEND_MSVCRT
    supports_shared = False
    poll_interval_seconds = NATIVE_POLL_INTERVAL_SECONDS

    @staticmethod
    def is_supported() -> bool:
        return msvcrt is not None

    def acquire(self, fd: int, mode: LockMode, blocking: bool) -> bool:
        while True:
            if self._try_lock(fd):
                return True
            if not blocking:
                return False
            time.sleep(self.poll_interval_seconds)

    def _try_lock(self, fd: int) -> bool:
        assert msvcrt is not None  # For type checkers.
        os.lseek(fd, 0, os.SEEK_SET)
        try:
            msvcrt.locking(fd, msvcrt.LK_NBLCK, 1)
        except OSError as e:
            if is_contention_error(e):
                return False
            raise
        return True

    def release(self, fd: int) -> None:
        assert msvcrt is not None  # For type checkers.
        os.lseek(fd, 0, os.SEEK_SET)
        msvcrt.locking(fd, msvcrt.LK_UNLCK, 1)


def _auto_backend(logger: logging.Logger) -> LockBackend:
    if FcntlFlockBackend.is_supported():
        return FcntlFlockBackend()
    if MsvcrtLockBackend.is_supported():
        logger.debug("fcntl locks unavailable; using msvcrt lock backend")
        return MsvcrtLockBackend()
    raise LockBackendUnavailableError()


def create_lock_backend(
    backend_name: str | None = None,
    *,
    logger: logging.Logger | None = None,
) -> LockBackend:
    """Create lock backend from explicit value or environment override."""
    log = logger or logging.getLogger(__name__)
    requested = requested_backend_name(backend_name)

    if requested not in KNOWN_BACKENDS:
        log.warning("Unknown lock backend '%s'; falling back to auto selection", requested)
        return _auto_backend(log)

    if requested == BACKEND_FCNTL:
        if FcntlFlockBackend.is_supported():
            return FcntlFlockBackend()
        log.warning("Requested fcntl backend is unavailable; falling back to auto selection")
    elif requested == BACKEND_MSVCRT:
        if MsvcrtLockBackend.is_supported():
            return MsvcrtLockBackend()
        log.warning("Requested msvcrt backend is unavailable; falling back to auto selection")

    return _auto_backend(log)


def close_quietly(backend: LockBackend, fd: int) -> None:
    """Close a descriptor, ignoring errors from an already-invalid fd."""
    with contextlib.suppress(OSError):
        backend.close(fd)
