"""Image decoder using pyvips.

Decodes downloaded bytes into a pyvips image and flattens images into RGB
numpy arrays ready for QImage conversion.
"""

import contextlib
from typing import Any

import numpy as np

from thumbnail_demo.logger import get_logger

_logger = get_logger("decoder")

RGB_CHANNELS = 3

_pyvips: Any | None = None


def _get_pyvips_module() -> Any:
    global _pyvips
    if _pyvips is None:
        import pyvips  # type: ignore

        # Decoded images are used once; keep the operation cache from growing
        with contextlib.suppress(Exception):
            pyvips.cache_set_max(0)
            pyvips.cache_set_max_mem(0)
            pyvips.cache_set_max_files(0)
        _pyvips = pyvips
    return _pyvips


def decode_image_bytes(data: bytes) -> tuple[Any | None, str | None]:
    """Decode image bytes into an in-memory pyvips image.

    Returns (image|None, error|None).
    """
    if not data:
        return None, "empty payload"
    pyvips = _get_pyvips_module()
    try:
        image = pyvips.Image.new_from_buffer(data, "")
        # Force the decode now so corrupt payloads fail here and not in the worker
        image = image.copy_memory()
    except pyvips.Error as e:
        _logger.debug("decode failed: %s", e)
        return None, str(e)
    _logger.debug("decoded: %sx%s bands=%s", image.width, image.height, image.bands)
    return image, None


def to_rgb_array(image: Any) -> "np.ndarray":
    """Flatten a pyvips image into an (H, W, 3) uint8 array."""
    pyvips = _get_pyvips_module()
    with contextlib.suppress(Exception):
        image = image.colourspace("srgb")
    if image.hasalpha():
        image = image.flatten(background=[0, 0, 0])
    if image.bands > RGB_CHANNELS:
        image = image.extract_band(0, n=RGB_CHANNELS)
    elif image.bands < RGB_CHANNELS:
        image = pyvips.Image.bandjoin([image] * RGB_CHANNELS)
    if image.format != "uchar":
        image = image.cast("uchar")

    mem = image.write_to_memory()
    array = np.frombuffer(mem, dtype=np.uint8).reshape(image.height, image.width, image.bands)
    if array.shape[2] != RGB_CHANNELS:
        raise RuntimeError(f"Unsupported band count after conversion: {array.shape[2]}")
    return array.copy()
