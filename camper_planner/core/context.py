"""Per-request context carrying the cooperative cancellation flag."""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar
from uuid import uuid4

from camper_planner.core.errors import RequestCancelled

T = TypeVar("T")


class RequestContext:
    """Context for a single suggestion request.

    One instance is created per request and threaded through every stage and
    every provider HTTP call, so cancelling it stops the pipeline wherever it is.
    """

    def __init__(self, request_id: str | None = None) -> None:
        self.request_id = request_id or f"req_{uuid4().hex[:12]}"
        self.cancelled = asyncio.Event()

    def cancel(self) -> None:
        self.cancelled.set()

    @property
    def is_cancelled(self) -> bool:
        return self.cancelled.is_set()

    def check(self, stage: str) -> None:
        if self.cancelled.is_set():
            raise RequestCancelled(stage)

    async def guard(self, awaitable: Awaitable[T], stage: str) -> T:
        """Await ``awaitable`` unless the request is cancelled first.

        The in-flight call is cancelled as soon as the flag is set.
        """
        if self.cancelled.is_set():
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise RequestCancelled(stage)

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self.cancelled.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
        if task.cancelled():
            raise RequestCancelled(stage)
        return task.result()
