"""Configuration dataclasses for file-lock-manager.

These dataclasses centralize tunable options for type safety and easy
testing. They can be built from environment variables (see ``env.py``)
or passed directly to a ``LockHandle``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class BackoffConfig:
    """Configuration for the polling backoff of timeout-bounded acquisition.

    Each failed poll multiplies the wait by ``multiplier`` plus a random
    jitter drawn from ``[0, jitter]``, capped at ``max_delay``.

    Attributes:
        initial_delay: First wait in seconds (default: 0.05)
        max_delay: Ceiling for any single wait in seconds (default: 0.2)
        multiplier: Base growth factor per retry (default: 1.5)
        jitter: Upper bound of the random addition to the multiplier (default: 0.10)
    """

    initial_delay: float = 0.05
    max_delay: float = 0.2
    multiplier: float = 1.5
    jitter: float = 0.10

    def to_dict(self) -> dict[str, Any]:
        return {
            "initial_delay": self.initial_delay,
            "max_delay": self.max_delay,
            "multiplier": self.multiplier,
            "jitter": self.jitter,
        }


@dataclass
class LogConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level string (default: "INFO")
        format: "text" or "json" (default: "text")
    """

    level: str = "INFO"
    format: str = "text"


@dataclass
class LockConfig:
    """Master configuration for lock handles.

    Attributes:
        backend: Backend name: "auto", "fcntl" or "msvcrt" (default: "auto")
        backoff: Backoff configuration for timeout-bounded acquisition
        file_mode: Permission bits used when the target file is created
    """

    backend: str = "auto"
    backoff: BackoffConfig = field(default_factory=BackoffConfig)
    file_mode: int = 0o666

    def to_dict(self) -> dict[str, Any]:
        return {
            "backend": self.backend,
            "backoff": self.backoff.to_dict(),
            "file_mode": self.file_mode,
        }
