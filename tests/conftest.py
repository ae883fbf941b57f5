"""Pytest configuration.

RunState and the thumbnail worker use PySide6 types. A single Qt core
application is created for the whole session (offscreen, no windowing
system needed) and shut down cleanly at the end.
"""

from __future__ import annotations

import io
import os
from typing import Any

import pytest

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a QCoreApplication exists before collecting/running tests."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    # Import lazily so non-Qt environments can still import this conftest.
    try:
        from PySide6.QtCore import QCoreApplication
    except ImportError:
        return

    global _APP

    app = QCoreApplication.instance()
    # Keep a strong ref so it isn't GC'd mid-session.
    _APP = app if app is not None else QCoreApplication([])


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    try:
        from PySide6.QtCore import QCoreApplication
    except ImportError:
        return

    app = QCoreApplication.instance()
    if app is None:
        return
    app.quit()
    app.processEvents()


@pytest.fixture
def make_png():
    """Factory returning PNG bytes for a solid image of the given size/mode."""
    Image = pytest.importorskip("PIL.Image")

    def _make(width: int, height: int, mode: str = "RGB") -> bytes:
        color: Any = (200, 40, 10) if mode == "RGB" else (200, 40, 10, 128) if mode == "RGBA" else 128
        buf = io.BytesIO()
        Image.new(mode, (width, height), color).save(buf, format="PNG")
        return buf.getvalue()

    return _make
