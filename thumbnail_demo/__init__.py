"""Asynchronous thumbnail fetch-and-process demo.

Usage:
    from thumbnail_demo import RunController

    controller = RunController()
    controller.state.outputChanged.connect(on_output)
    await controller.run()
"""

from .controller import RunController
from .errors import InvalidImageError, ThumbnailError, UnexpectedResponseError
from .fetcher import ThumbnailFetcher

__all__ = [
    "InvalidImageError",
    "RunController",
    "ThumbnailError",
    "ThumbnailFetcher",
    "UnexpectedResponseError",
]
