"""Custom exceptions for file-lock-manager.

Every exception carries the path of the file involved so that a message
read in a log is enough to tell which lock went wrong.
"""

from __future__ import annotations


class FileLockError(Exception):
    """Base exception for all file lock errors."""

    def __init__(self, message: str, path: str | None = None, details: str | None = None):
        self.message = message
        self.path = path
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InvalidLockArgumentError(FileLockError, ValueError):
    """Raised for arguments rejected before touching the filesystem.

    Examples:
        - Empty or whitespace-only path
        - Non-positive timeout
    """


class LockFileNotFoundError(FileLockError):
    """Raised when the target file cannot be opened or created.

    Examples:
        - Parent directory does not exist
        - Permission denied
        - Path names a directory
    """

    def __init__(self, path: str, original_error: Exception | None = None):
        self.original_error = original_error
        details = str(original_error) if original_error is not None else None
        super().__init__(f"Failed to open file: {path}", path=path, details=details)


class LockError(FileLockError):
    """Raised when a lock could not be established on the file."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: str | None = None,
        original_error: Exception | None = None,
    ):
        self.original_error = original_error
        if details is None and original_error is not None:
            details = str(original_error)
        super().__init__(message, path=path, details=details)


class LockContendedError(LockError):
    """Raised by a non-blocking acquire when another holder has the lock."""

    def __init__(self, path: str, mode: str):
        self.mode = mode
        super().__init__(f"File is already locked, cannot take {mode} lock: {path}", path=path)


class LockTimeoutError(LockError):
    """Raised when a timeout-bounded acquire runs out of time.

    Attributes:
        timeout_seconds: The timeout the caller asked for
    """

    def __init__(self, path: str, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Failed to establish a lock on file within {float(timeout_seconds):g} seconds: {path}",
            path=path,
        )


class UnlockError(FileLockError):
    """Raised when releasing a lock fails.

    Either this instance never held the lock, or the OS refused to drop it.
    In the latter case the real lock state is unknown.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: str | None = None,
        original_error: Exception | None = None,
    ):
        self.original_error = original_error
        if details is None and original_error is not None:
            details = str(original_error)
        super().__init__(message, path=path, details=details)


class LockHandleClosedError(FileLockError):
    """Raised when a handle is used after it has been closed."""

    def __init__(self, path: str):
        super().__init__(f"Lock handle is closed: {path}", path=path)


class LockBackendUnavailableError(FileLockError):
    """Raised when no usable locking primitive exists for the platform.

    Backend selection happens before any file is involved, so ``path`` is
    only set once ``LockHandle`` re-raises it for the file it was opening.
    """

    def __init__(self, path: str | None = None):
        message = "No advisory file locking primitive available on this platform"
        if path is not None:
            message = f"{message}: {path}"
        super().__init__(message, path=path)
