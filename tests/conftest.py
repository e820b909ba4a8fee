"""Pytest configuration and shared fixtures."""
import os
import tempfile

# Kivy reads these at import time: keep it away from pytest's argv, the
# console and the user's ~/.kivy.
os.environ.setdefault("KIVY_NO_ARGS", "1")
os.environ.setdefault("KIVY_NO_CONSOLELOG", "1")
os.environ.setdefault("KIVY_NO_FILELOG", "1")
os.environ.setdefault("KIVY_HOME", tempfile.mkdtemp(prefix="llamachat-kivy-"))

import pytest


class FakeScheduler:
    """Stands in for Clock.schedule_once; fires callbacks on demand."""

    def __init__(self):
        self.pending = []

    def __call__(self, callback, timeout=0):
        self.pending.append((callback, timeout))

    def run_all(self):
        pending, self.pending = self.pending, []
        for callback, timeout in pending:
            callback(timeout)


@pytest.fixture
def scheduler():
    """Return a scheduler whose callbacks run only when run_all() is called."""
    return FakeScheduler()


@pytest.fixture(scope="session")
def scheduler_factory():
    """Return the fake scheduler class, for tests that need a fresh one per example."""
    return FakeScheduler


@pytest.fixture
def session_path(tmp_path):
    """Return a path for a throwaway session file."""
    return str(tmp_path / "session.json")
