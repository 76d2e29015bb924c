# webapp_scraper/crawler/clock.py
"""
Time source for the crawler: timestamps and the waits between steps.
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...

    async def sleep(self, seconds: float) -> None: ...


class AsyncioClock:
    """Wall clock in UTC, waits via :func:`asyncio.sleep`."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    async def sleep(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)
