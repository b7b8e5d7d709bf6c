"""
Debouncing for preview re-renders.

The customizer changes the frame configuration in bursts (dragging a zoom
slider, clicking through colors). A Debouncer owned by the caller coalesces
each burst into a single call made `delay` seconds after the last trigger.
Closing it, or leaving its `async with` block, cancels whatever is pending.
"""

import asyncio
import inspect
from typing import Any, Callable, Dict, Optional, Tuple
from loguru import logger


class Debouncer:

    def __init__(self, delay: float, callback: Callable[..., Any]):
        if delay < 0:
            raise ValueError(f"Debounce delay must be >= 0, got {delay}")
        self.delay = delay
        self.callback = callback
        self._task: Optional[asyncio.Task] = None
        self._pending: Optional[Tuple[tuple, Dict[str, Any]]] = None
        self._closed = False

    @classmethod
    def from_config(cls, config, callback: Callable[..., Any]) -> "Debouncer":
        """Debouncer using the PREVIEW_DEBOUNCE_MS delay."""
        return cls(config.PREVIEW_DEBOUNCE_MS / 1000, callback)

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def trigger(self, *args, **kwargs):
        """Schedule a call, replacing any call still waiting. Needs a running loop."""
        if self._closed:
            raise RuntimeError("Debouncer is closed")

        self._cancel_task()
        self._pending = (args, kwargs)
        self._task = asyncio.get_running_loop().create_task(self._run_later())

    async def flush(self):
        """Run the waiting call now instead of after the delay."""
        self._cancel_task()
        await self._run_pending()

    def cancel(self):
        """Drop the waiting call, if any."""
        self._cancel_task()
        self._pending = None

    def close(self):
        self.cancel()
        self._closed = True

    async def __aenter__(self) -> "Debouncer":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()

    def _cancel_task(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run_later(self):
        await asyncio.sleep(self.delay)
        self._task = None
        await self._run_pending()

    async def _run_pending(self):
        if self._pending is None:
            return

        args, kwargs = self._pending
        self._pending = None
        try:
            outcome = self.callback(*args, **kwargs)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.error(f"Debounced call {getattr(self.callback, '__name__', self.callback)} failed: {e}")
            raise
