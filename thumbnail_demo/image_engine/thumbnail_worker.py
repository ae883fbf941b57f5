"""Background thumbnail rendering with completion callbacks.

Resizing and the numpy -> QImage conversion run on a thread pool. QImage
creation from raw buffers is safe off the GUI thread (QPixmap is not), so the
finished QImage is handed straight to the caller's completion callback.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

import numpy as np
from PySide6.QtGui import QImage

from thumbnail_demo.image_engine.decoder import to_rgb_array
from thumbnail_demo.logger import get_logger

_logger = get_logger("thumbnail_worker")

_RGB_CHANNELS = 3
_EXPECTED_NDIM = 3

ThumbnailCallback = Callable[[QImage | None], None]


def array_to_qimage(image_data: Any) -> QImage:
    """Convert a numpy array (H,W,3 uint8) into a detached QImage."""
    arr = np.asarray(image_data)
    if arr.ndim != _EXPECTED_NDIM or arr.shape[2] < _RGB_CHANNELS:
        raise ValueError("unexpected image array shape")
    arr = np.ascontiguousarray(arr[:, :, :_RGB_CHANNELS], dtype=np.uint8)
    height, width = arr.shape[0], arr.shape[1]
    bytes_per_line = _RGB_CHANNELS * width
    # .copy() detaches the QImage from the numpy buffer's lifetime
    return QImage(arr.data, width, height, bytes_per_line, QImage.Format.Format_RGB888).copy()


def render_thumbnail(image: Any, width: int, height: int) -> QImage:
    """Resize a decoded pyvips image to exactly width x height."""
    thumb = image.thumbnail_image(width, height=height, size="force")
    return array_to_qimage(to_rgb_array(thumb))


class ThumbnailWorker:
    """Callback-based thumbnail generator.

    `prepare_thumbnail` returns immediately; `completion` is invoked exactly
    once from a pool thread with the QImage, or with None on failure. Only a
    submit after `shutdown` completes on the calling thread.
    """

    def __init__(self, max_workers: int = 1, render_fn: Callable[[Any, int, int], QImage] = render_thumbnail):
        self._render_fn = render_fn
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="thumbnail")
        _logger.debug("ThumbnailWorker init: workers=%s", max_workers)

    def prepare_thumbnail(self, image: Any, width: int, height: int, completion: ThumbnailCallback) -> None:
        try:
            future = self.executor.submit(self._render_and_complete, image, width, height, completion)
        except RuntimeError:
            # Pool already shut down
            _logger.exception("submit thumbnail failed")
            completion(None)
            return
        _logger.debug("thumbnail queued: target=(%s,%s)", width, height)
        future.add_done_callback(lambda f: self._on_cancelled(f, completion))

    def _render_and_complete(self, image: Any, width: int, height: int, completion: ThumbnailCallback) -> None:
        try:
            result = self._render_fn(image, width, height)
        except Exception:
            _logger.exception("thumbnail render failed")
            result = None
        if result is not None and result.isNull():
            result = None
        completion(result)

    def _on_cancelled(self, future: Future, completion: ThumbnailCallback) -> None:
        # Queued work dropped by shutdown(cancel_futures=True) never ran
        if future.cancelled():
            _logger.debug("thumbnail cancelled before render")
            completion(None)

    def shutdown(self) -> None:
        self.executor.shutdown(wait=False, cancel_futures=True)
