"""Clock and sleeper used by the renderer and the poll driver."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Wall-clock source plus a cancellable sleep."""

    def now(self) -> datetime: ...

    async def sleep(self, seconds: float) -> None: ...


class SystemClock:
    """Local wall-clock time and ``asyncio.sleep``.

    Sleeping is a plain await, so cancelling the awaiting task (or an
    enclosing ``asyncio.timeout``) aborts it immediately.
    """

    def now(self) -> datetime:
        return datetime.now().astimezone()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
