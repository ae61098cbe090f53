"""Shared fixtures for lazy_generator tests."""

from contextlib import contextmanager

import pytest


class ResourceTracker:
    """Counts acquisitions and releases of a scoped resource."""

    def __init__(self):
        self.acquired = 0
        self.released = 0

    @contextmanager
    def hold(self):
        self.acquired += 1
        try:
            yield
        finally:
            self.released += 1


@pytest.fixture
def tracker():
    """Provide a fresh resource tracker."""
    return ResourceTracker()


@pytest.fixture(autouse=True)
def _propagate_failures_by_default(monkeypatch):
    """Keep a developer's .env from changing failure propagation in tests."""
    monkeypatch.setenv("LAZY_GENERATOR_PROPAGATE_FAILURES", "true")
