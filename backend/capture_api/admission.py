"""
Bounded-concurrency admission for capture work
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AdmissionQueue:
    """Runs at most `concurrency` operations at once; the rest wait in arrival order"""

    def __init__(self, concurrency: int):
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self.concurrency = concurrency
        self._semaphore = asyncio.Semaphore(concurrency)
        self.active = 0
        self.waiting = 0

    async def submit(self, operation: Callable[..., Awaitable[T]], *args: Any) -> T:
        self.waiting += 1
        if self._semaphore.locked():
            logger.info(f"Queue full ({self.active}/{self.concurrency} running), {self.waiting} waiting")
        try:
            await self._semaphore.acquire()
        finally:
            self.waiting -= 1

        self.active += 1
        try:
            return await operation(*args)
        finally:
            self.active -= 1
            self._semaphore.release()

    def stats(self) -> dict:
        return {
            "concurrency": self.concurrency,
            "active": self.active,
            "waiting": self.waiting,
        }
