"""Root conftest for pytest configuration and shared fixtures.

Loaded before the colocated test packages under tripwire/, making its
fixtures available to every domain and adapter test.
"""

import asyncio
import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables: must be set before any tripwire module import
# Uses setdefault so real env vars are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("TRIPWIRE_LOG_LEVEL", "DEBUG")


# ---------------------------------------------------------------------------
# Shared fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_scheduler():
    """Manual-clock Scheduler."""
    from tripwire.adapters.scheduler.fake import FakeScheduler

    return FakeScheduler()


@pytest.fixture
def fake_root(fake_scheduler):
    """Fake AnalyticsRoot on the shared manual clock."""
    from tripwire.domains.triggers.fakes import FakeAnalyticsRoot

    root = FakeAnalyticsRoot(fake_scheduler)
    yield root
    root.dispose()


@pytest.fixture
def drain():
    """Let pending done-callbacks and call_soon handles run."""

    async def _drain(rounds: int = 10) -> None:
        for _ in range(rounds):
            await asyncio.sleep(0)

    return _drain
