"""Scheduler adapters."""

from tripwire.adapters.scheduler.asyncio_loop import AsyncioScheduler
from tripwire.adapters.scheduler.fake import FakeScheduler

__all__ = ["AsyncioScheduler", "FakeScheduler"]
