from __future__ import annotations

import threading
from collections.abc import Callable, Iterator


class RunLog:
    """Append-only list of status lines, safe to append from any thread.

    `on_append` is called after each append, outside the lock, with the new
    line; it lets an observer (RunState) publish the change.
    """

    def __init__(self, on_append: Callable[[str], None] | None = None) -> None:
        self._lines: list[str] = []
        self._lock = threading.Lock()
        self._on_append = on_append

    def append(self, line: str) -> None:
        with self._lock:
            self._lines.append(str(line))
        if self._on_append is not None:
            self._on_append(line)

    def snapshot(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())
