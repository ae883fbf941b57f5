"""Remote thumbnail acquisition.

`ThumbnailFetcher.fetch` downloads an image, checks the response, decodes
the payload and renders an aspect-fit thumbnail on the worker pool. Nothing
is cached; each call runs the whole pipeline.
"""

from __future__ import annotations

import asyncio

import httpx
from PySide6.QtGui import QImage

from thumbnail_demo.config import FetchConfig, ThumbnailRequest
from thumbnail_demo.errors import InvalidImageError, UnexpectedResponseError
from thumbnail_demo.image_engine.bridge import OneShot
from thumbnail_demo.image_engine.decoder import decode_image_bytes
from thumbnail_demo.image_engine.geometry import thumbnail_size
from thumbnail_demo.image_engine.thumbnail_worker import ThumbnailWorker
from thumbnail_demo.logger import get_logger

_logger = get_logger("fetcher")

HTTP_OK = 200


class ThumbnailFetcher:
    def __init__(
        self,
        config: FetchConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        worker: ThumbnailWorker | None = None,
    ):
        """Create a fetcher.

        `client` is used as-is and never closed here. Without one, a client is
        opened per fetch (on `transport` when given, e.g. httpx.MockTransport).
        """
        self.config = config or FetchConfig()
        self._client = client
        self._transport = transport
        self._worker_owned = worker is None
        self._worker = worker or ThumbnailWorker()

    async def fetch(self, url: str) -> QImage:
        request = ThumbnailRequest(url, self.config.thumbnail_width, self.config.thumbnail_height)

        delay_ms = self.config.startup_delay_ms
        if delay_ms > 0:
            # Simulated latency hook
            await asyncio.sleep(delay_ms / 1000.0)

        payload = await self._download(request.url)

        # Full decode is CPU-bound; keep it off the event loop
        loop = asyncio.get_running_loop()
        image, error = await loop.run_in_executor(None, decode_image_bytes, payload)
        if image is None:
            _logger.warning("invalid image from %s: %s", request.url, error)
            raise InvalidImageError(error or "payload is not an image")

        width, height = thumbnail_size(image.width, image.height, request.width, request.height)
        _logger.debug(
            "fit: source=(%s,%s) box=(%s,%s) thumb=(%s,%s)",
            image.width,
            image.height,
            request.width,
            request.height,
            width,
            height,
        )
        return await self._prepare_thumbnail(image, width, height)

    async def _download(self, url: str) -> bytes:
        if self._client is not None:
            response = await self._client.get(url)
        else:
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                response = await client.get(url)

        if not isinstance(response, httpx.Response) or response.status_code != HTTP_OK:
            status = getattr(response, "status_code", None)
            _logger.warning("unexpected response from %s: status=%s", url, status)
            raise UnexpectedResponseError(status, url)
        _logger.debug("downloaded %s bytes from %s", len(response.content), url)
        return response.content

    async def _prepare_thumbnail(self, image, width: int, height: int) -> QImage:
        slot = OneShot()

        def _completion(thumb: QImage | None) -> None:
            if thumb is None or thumb.isNull():
                slot.reject(InvalidImageError("thumbnail generation produced no image"))
            else:
                slot.resolve(thumb)

        self._worker.prepare_thumbnail(image, width, height, _completion)
        return await slot

    def close(self) -> None:
        if self._worker_owned:
            self._worker.shutdown()
