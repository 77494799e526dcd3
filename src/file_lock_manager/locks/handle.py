"""Advisory whole-file lock bound to a single open descriptor.

``LockHandle`` owns one descriptor on one path for its whole life and
tracks whether *this instance* holds a lock it acquired itself. That flag
is bookkeeping for the instance's own obligations; it is never refreshed
from the OS, and other instances or processes holding the same file are
invisible to it.

Usage:
    with LockHandle("data/state.json") as handle:
        with handle.locked(LockMode.EXCLUSIVE, timeout=5):
            ...

    handle = LockHandle("data/state.json")
    if handle.try_acquire(LockMode.SHARED):
        try:
            ...
        finally:
            handle.release()
    handle.close()
"""

from __future__ import annotations

import contextlib
import logging
import numbers
import os
import time
from collections.abc import Iterator
from types import TracebackType

from file_lock_manager.core.config import BackoffConfig, LockConfig
from file_lock_manager.core.env import effective_backoff_config, effective_lock_config
from file_lock_manager.core.exceptions import (
    FileLockError,
    InvalidLockArgumentError,
    LockBackendUnavailableError,
    LockContendedError,
    LockError,
    LockFileNotFoundError,
    LockHandleClosedError,
    LockTimeoutError,
    UnlockError,
)
from file_lock_manager.core.logging import with_log_context
from file_lock_manager.locks.backends import LockBackend, LockMode, close_quietly, create_lock_backend
from file_lock_manager.locks.backoff import iter_waits


def _coerce_mode(mode: LockMode | str, path: str) -> LockMode:
    if isinstance(mode, LockMode):
        return mode
    try:
        return LockMode(str(mode).lower())
    except ValueError:
        raise InvalidLockArgumentError(f"Unknown lock mode {mode!r}", path=path) from None


class LockHandle:
    """Cooperative advisory lock on one file.

    Parameters:
        path: File to lock. Created empty if it does not exist.
        backend: Backend instance or name ("auto", "fcntl", "msvcrt").
            Defaults to the FILE_LOCK_BACKEND env var, then auto.
        backoff: Polling backoff for ``acquire_with_timeout``. Defaults to
            the built-in schedule with env-var overrides applied.
        file_mode: Permission bits used if the file has to be created.
        logger: Logger to report through; bound to the lock path.

    Raises:
        InvalidLockArgumentError: path is empty or whitespace-only
        LockFileNotFoundError: the file cannot be opened or created
        LockBackendUnavailableError: the platform has no locking primitive
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        *,
        backend: LockBackend | str | None = None,
        backoff: BackoffConfig | None = None,
        file_mode: int = 0o666,
        logger: logging.Logger | None = None,
    ):
        # Set first so close() is safe after a failed construction.
        self._fd: int | None = None
        self._held = False
        self._mode: LockMode | None = None

        raw_path = os.fspath(path) if isinstance(path, os.PathLike) else path
        if not isinstance(raw_path, str):
            raise InvalidLockArgumentError(f"File path must be a string, got {type(raw_path).__name__}")
        if not raw_path.strip():
            raise InvalidLockArgumentError("File path cannot be empty", path=raw_path)

        self._path = raw_path
        base_logger = logger or logging.getLogger(__name__)
        self.logger = with_log_context(base_logger, lock_path=raw_path)
        if backend is None or isinstance(backend, str):
            try:
                backend = create_lock_backend(backend, logger=base_logger)
            except LockBackendUnavailableError as e:
                raise LockBackendUnavailableError(raw_path) from e
        self.backend = backend
        self.backoff = backoff or effective_backoff_config()

        try:
            self._fd = self.backend.open(raw_path, file_mode)
        except (OSError, ValueError) as e:
            raise LockFileNotFoundError(raw_path, original_error=e) from e
        self.logger.debug("Opened %s for locking (backend=%s)", raw_path, self.backend.name)

    @classmethod
    def from_config(
        cls,
        path: str | os.PathLike[str],
        config: LockConfig | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> LockHandle:
        """Create a handle from a LockConfig (default: built from the environment)."""
        cfg = config or effective_lock_config()
        return cls(path, backend=cfg.backend, backoff=cfg.backoff, file_mode=cfg.file_mode, logger=logger)

    @property
    def path(self) -> str:
        return self._path

    @property
    def mode(self) -> LockMode | None:
        """Mode of the lock this instance holds, or None."""
        return self._mode

    @property
    def closed(self) -> bool:
        return self._fd is None

    def is_locked(self) -> bool:
        """Whether this instance currently holds a lock it acquired."""
        return self._held

    def _require_open(self) -> int:
        if self._fd is None:
            raise LockHandleClosedError(self._path)
        return self._fd

    def acquire(self, mode: LockMode | str = LockMode.EXCLUSIVE, blocking: bool = True) -> bool:
        """Set a lock on the file.

        With ``blocking=True`` the call waits for as long as it takes.
        With ``blocking=False`` a single attempt is made.

        Returns:
            True once the lock is held

        Raises:
            LockContendedError: non-blocking attempt found the file locked
            LockError: the OS refused the lock for any other reason
        """
        fd = self._require_open()
        lock_mode = _coerce_mode(mode, self._path)
        if lock_mode is LockMode.SHARED and not self.backend.supports_shared:
            self.logger.info(
                "Backend %s has no shared locks; taking an exclusive lock on %s", self.backend.name, self._path
            )

        try:
            acquired = self.backend.acquire(fd, lock_mode, blocking)
        except OSError as e:
            raise LockError(
                f"Couldn't set a lock on the file: {self._path}",
                path=self._path,
                original_error=e,
            ) from e

        if not acquired:
            raise LockContendedError(self._path, lock_mode.value)

        self._held = True
        self._mode = lock_mode
        self.logger.debug("Acquired %s lock on %s", lock_mode.value, self._path)
        return True

    def try_acquire(self, mode: LockMode | str = LockMode.EXCLUSIVE) -> bool:
        """Attempt a non-blocking lock; True if it was set, False otherwise.

        Contention and I/O failures both come back as False. I/O failures
        are logged so they are not lost entirely.
        """
        try:
            return self.acquire(mode, blocking=False)
        except LockContendedError:
            return False
        except LockError as e:
            self.logger.warning("Non-blocking lock attempt failed on %s: %s", self._path, e)
            return False

    def acquire_with_timeout(self, mode: LockMode | str, timeout_seconds: float) -> bool:
        """Poll for the lock until it is set or ``timeout_seconds`` elapse.

        Waits between polls follow the jittered exponential backoff in
        ``locks.backoff``. No ordering between competing waiters is implied.

        Raises:
            InvalidLockArgumentError: timeout is not a positive number
            LockTimeoutError: the deadline passed without getting the lock
        """
        if (
            isinstance(timeout_seconds, bool)
            or not isinstance(timeout_seconds, numbers.Real)
            or not timeout_seconds > 0
        ):
            raise InvalidLockArgumentError(
                f"Timeout must be greater than zero, got {timeout_seconds!r}: {self._path}",
                path=self._path,
            )
        self._require_open()
        lock_mode = _coerce_mode(mode, self._path)

        deadline = time.monotonic() + timeout_seconds
        for attempt, wait in enumerate(iter_waits(self.backoff), start=1):
            if self.try_acquire(lock_mode):
                if attempt > 1:
                    self.logger.info("Acquired %s lock on %s after %d attempts", lock_mode.value, self._path, attempt)
                return True

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            self.logger.debug("Lock on %s busy; retrying in %.3fs", self._path, min(wait, remaining))
            time.sleep(min(wait, remaining))

        raise LockTimeoutError(self._path, timeout_seconds)

    def release(self) -> bool:
        """Release the lock held by this instance.

        Raises:
            UnlockError: nothing is held by this instance, or the OS refused
                to release. In the latter case ``is_locked()`` stays True.
        """
        fd = self._require_open()
        if not self._held:
            raise UnlockError(
                f"Trying to unlock a file that isn't locked by this instance: {self._path}",
                path=self._path,
            )

        try:
            self.backend.release(fd)
        except OSError as e:
            raise UnlockError(
                f"Couldn't unlock the file: {self._path}",
                path=self._path,
                original_error=e,
            ) from e

        self.logger.debug("Released %s lock on %s", self._mode.value if self._mode else "", self._path)
        self._held = False
        self._mode = None
        return True

    @contextlib.contextmanager
    def locked(self, mode: LockMode | str = LockMode.EXCLUSIVE, timeout: float | None = None) -> Iterator[LockHandle]:
        """Hold the lock for the duration of a ``with`` block.

        Without ``timeout`` this blocks until the lock is available.
        """
        if timeout is None:
            self.acquire(mode, blocking=True)
        else:
            self.acquire_with_timeout(mode, timeout)
        try:
            yield self
        finally:
            if self._held:
                self.release()

    def close(self) -> None:
        """Release any held lock and close the descriptor. Never raises."""
        fd = getattr(self, "_fd", None)
        if fd is None:
            return

        if getattr(self, "_held", False):
            try:
                self.release()
            except FileLockError as e:
                self.logger.debug("Discarding release error while closing %s: %s", self._path, e)

        self._fd = None
        self._held = False
        self._mode = None
        close_quietly(self.backend, fd)

    def __enter__(self) -> LockHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def __del__(self) -> None:
        # Logging may already be torn down at interpreter exit.
        with contextlib.suppress(Exception):
            self.close()

    def __repr__(self) -> str:
        path = getattr(self, "_path", None)
        return f"LockHandle(path={path!r}, locked={self._held}, closed={self.closed})"
