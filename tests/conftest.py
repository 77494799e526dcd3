"""Pytest configuration and fixtures for file-lock-manager tests"""
import logging

import pytest

from file_lock_manager.core.constants import (
    ENV_BACKOFF_INITIAL,
    ENV_BACKOFF_JITTER,
    ENV_BACKOFF_MAX,
    ENV_BACKOFF_MULTIPLIER,
    ENV_LOCK_BACKEND,
    ENV_LOG_FORMAT,
    ENV_LOG_LEVEL,
    LOGGER_NAME,
)
from file_lock_manager.locks.handle import LockHandle


@pytest.fixture(autouse=True)
def clean_lock_env(monkeypatch):
    """Keep developer shells from leaking overrides into tests"""
    for name in (
        ENV_LOCK_BACKEND,
        ENV_LOG_LEVEL,
        ENV_LOG_FORMAT,
        ENV_BACKOFF_INITIAL,
        ENV_BACKOFF_MAX,
        ENV_BACKOFF_MULTIPLIER,
        ENV_BACKOFF_JITTER,
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_package_logger():
    """setup_logging tests change the package logger; restore it afterwards"""
    logger = logging.getLogger(LOGGER_NAME)
    handlers = logger.handlers[:]
    level = logger.level
    yield
    for handler in logger.handlers[:]:
        if handler not in handlers:
            handler.close()
            logger.removeHandler(handler)
    logger.setLevel(level)


@pytest.fixture
def lock_file(tmp_path):
    """An existing file with content, as the tests in the wild lock"""
    path = tmp_path / "file_lock_manager_test.txt"
    path.write_text("Test content")
    return path


@pytest.fixture
def make_handle(lock_file):
    """Factory for handles on the shared test file; closes them all on teardown"""
    created = []

    def _make(path=None, **kwargs):
        handle = LockHandle(str(path or lock_file), **kwargs)
        created.append(handle)
        return handle

    yield _make

    for handle in created:
        handle.close()
