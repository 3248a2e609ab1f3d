"""
tests/conftest.py

Shared fixtures for the statistics test-suite.
"""

from __future__ import annotations

import pytest

from tests.fakes import FakeClock, ManualExecutor


@pytest.fixture()
def executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
