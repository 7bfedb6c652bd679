"""Shared fixtures."""

from __future__ import annotations

import pytest

from fakes import FakeClock, FakeHyperliquid


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def hyperliquid() -> FakeHyperliquid:
    return FakeHyperliquid()
