"""Aspect-fit geometry for thumbnails."""

from __future__ import annotations


def aspect_fit_rect(
    src_width: float, src_height: float, box_width: float, box_height: float
) -> tuple[float, float, float, float]:
    """Largest rect with the source aspect ratio that fits in the box.

    Returns (x, y, width, height), centered in the box. Either width equals
    box_width or height equals box_height; the source is scaled up as well as
    down.
    """
    if src_width <= 0 or src_height <= 0:
        raise ValueError(f"source size must be positive, got {src_width}x{src_height}")
    if box_width <= 0 or box_height <= 0:
        raise ValueError(f"box size must be positive, got {box_width}x{box_height}")

    scale = min(box_width / src_width, box_height / src_height)
    width = src_width * scale
    height = src_height * scale
    return (box_width - width) / 2.0, (box_height - height) / 2.0, width, height


def thumbnail_size(src_width: int, src_height: int, box_width: int, box_height: int) -> tuple[int, int]:
    """Integer pixel size of the aspect-fit rect (each side at least 1)."""
    _x, _y, w, h = aspect_fit_rect(src_width, src_height, box_width, box_height)
    return max(1, min(box_width, round(w))), max(1, min(box_height, round(h)))
