from __future__ import annotations


class ThumbnailError(Exception):
    """Base class for failures raised by the thumbnail pipeline."""


class UnexpectedResponseError(ThumbnailError):
    """The server answered, but not with a plain 200 response."""

    def __init__(self, status_code: int | None = None, url: str | None = None):
        self.status_code = status_code
        self.url = url
        super().__init__(f"unexpected response: status={status_code} url={url}")


class InvalidImageError(ThumbnailError):
    """Payload could not be decoded, or resizing produced no image."""
