"""One-shot bridge from completion callbacks to awaitables.

Callback-based APIs (thread pool completions, Qt signals) report their result
from whatever thread they run on. `OneShot` collects exactly one outcome and
hands it to the owning event loop, so a coroutine can simply ``await`` it.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Generator

from thumbnail_demo.logger import get_logger

_logger = get_logger("bridge")


class OneShot:
    """Pending result slot that can be settled once, from any thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future = self._loop.create_future()
        self._lock = threading.Lock()
        self._settled = False

    @property
    def settled(self) -> bool:
        with self._lock:
            return self._settled

    def resolve(self, value: Any) -> bool:
        """Deliver a result. Returns False if the slot was already settled."""
        return self._settle(False, value)

    def reject(self, exc: BaseException) -> bool:
        """Deliver a failure. Returns False if the slot was already settled."""
        return self._settle(True, exc)

    def _settle(self, failed: bool, payload: Any) -> bool:
        with self._lock:
            if self._settled:
                _logger.debug("one-shot already settled, dropping %s", "error" if failed else "result")
                return False
            self._settled = True
        self._loop.call_soon_threadsafe(self._apply, failed, payload)
        return True

    def _apply(self, failed: bool, payload: Any) -> None:
        # Runs on the loop thread; the awaiting task may have been cancelled meanwhile
        if self._future.done():
            return
        if failed:
            self._future.set_exception(payload)
        else:
            self._future.set_result(payload)

    def __await__(self) -> Generator[Any, None, Any]:
        return self._future.__await__()
