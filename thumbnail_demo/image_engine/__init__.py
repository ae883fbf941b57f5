"""Image Engine - decoding, fit geometry and thumbnail rendering.

Usage:
    from thumbnail_demo.image_engine import ThumbnailWorker, decode_image_bytes, thumbnail_size

    image, error = decode_image_bytes(payload)
    width, height = thumbnail_size(image.width, image.height, 600, 600)
    worker.prepare_thumbnail(image, width, height, on_done)
"""

from .bridge import OneShot
from .decoder import decode_image_bytes
from .geometry import aspect_fit_rect, thumbnail_size
from .thumbnail_worker import ThumbnailWorker

__all__ = ["OneShot", "ThumbnailWorker", "aspect_fit_rect", "decode_image_bytes", "thumbnail_size"]
