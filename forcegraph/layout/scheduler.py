"""Frame schedulers driving the tick-then-render loop.

A scheduler runs callbacks on the caller's own execution context; nothing
here starts threads.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, Hashable, Optional, Protocol

logger = logging.getLogger(__name__)

FrameCallback = Callable[[], None]


class FrameScheduler(Protocol):
    def request_frame(self, callback: FrameCallback) -> Hashable:
        """Run ``callback`` once on the next frame and return a cancel handle."""

    def cancel(self, handle: Hashable) -> None:
        """Drop a pending callback; unknown or spent handles are ignored."""


class ManualScheduler:
    """Frames advance only when the owner calls :meth:`run_frame`.

    Used headless (CLI, tests): callbacks requested while a frame runs are
    queued for the next frame, never the current one.
    """

    def __init__(self) -> None:
        self._pending: Dict[int, FrameCallback] = {}
        self._next_handle = 0
        self.frames_run = 0

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: Hashable) -> None:
        self._pending.pop(handle, None)  # type: ignore[arg-type]

    def run_frame(self) -> int:
        """Run every callback queued before this call; return how many ran."""

        batch = list(self._pending.items())
        self._pending.clear()
        for _, callback in batch:
            callback()
        if batch:
            self.frames_run += 1
        return len(batch)

    def run_until_idle(self, max_frames: int = 10_000) -> int:
        frames = 0
        while self._pending and frames < max_frames:
            self.run_frame()
            frames += 1
        if self._pending:
            logger.warning("Scheduler still busy after %d frame(s)", frames)
        return frames


class AsyncioScheduler:
    """Fixed-interval frames on an asyncio event loop."""

    def __init__(
        self,
        interval: float = 1.0 / 60.0,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.interval = float(interval)
        self._loop = loop

    def _event_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        return self._event_loop().call_later(self.interval, callback)

    def cancel(self, handle: Hashable) -> None:
        if isinstance(handle, asyncio.TimerHandle):
            handle.cancel()


__all__ = ["AsyncioScheduler", "FrameCallback", "FrameScheduler", "ManualScheduler"]
