"""Jittered exponential backoff for timeout-bounded lock acquisition.

Backoff Formula:
    wait = initial_delay
    after each failed poll:
        wait = min(max_delay, wait * (multiplier + random.uniform(0, jitter)))

With the defaults this starts at 50ms and converges on a 200ms polling
ceiling. The jitter keeps competing waiters from retrying in lockstep.
"""

from __future__ import annotations

import random
from collections.abc import Iterator

from file_lock_manager.core.config import BackoffConfig
from file_lock_manager.core.constants import DEFAULT_BACKOFF


def next_wait(current: float, config: BackoffConfig = DEFAULT_BACKOFF) -> float:
    """Return the wait that follows ``current``."""
    factor = config.multiplier + random.uniform(0, config.jitter)
    return min(config.max_delay, current * factor)


def iter_waits(config: BackoffConfig = DEFAULT_BACKOFF) -> Iterator[float]:
    """Yield the unbounded sequence of waits, starting at ``initial_delay``."""
    wait = min(config.initial_delay, config.max_delay)
    while True:
        yield wait
        wait = next_wait(wait, config)
