"""Drives one thumbnail run and publishes its progress on a RunState."""

from __future__ import annotations

from thumbnail_demo.app.state.run_state import RunState
from thumbnail_demo.config import FetchConfig
from thumbnail_demo.fetcher import ThumbnailFetcher
from thumbnail_demo.logger import get_logger

_logger = get_logger("controller")

RUNNING_MESSAGE = "Running..."
ERROR_MESSAGE = "Ooops, got an error!"
DONE_MESSAGE = "Done!"


class RunController:
    def __init__(
        self,
        fetcher: ThumbnailFetcher | None = None,
        *,
        url: str | None = None,
        config: FetchConfig | None = None,
        state: RunState | None = None,
    ):
        self.config = config or (fetcher.config if fetcher is not None else FetchConfig())
        self.url = url or self.config.url
        self._fetcher_owned = fetcher is None
        self.fetcher = fetcher or ThumbnailFetcher(self.config)
        self.state = state or RunState()

    async def run(self) -> None:
        """Fetch a fresh thumbnail; every call is a new attempt."""
        self.state._set_running(True)
        try:
            self._output_message(RUNNING_MESSAGE)
            try:
                image = await self.fetcher.fetch(self.url)
            except Exception:
                # The log line stays generic; the cause only goes to the logger
                _logger.exception("run failed for %s", self.url)
                self._output_message(ERROR_MESSAGE)
            else:
                self.state._set_image(image)
                _logger.debug("thumbnail ready: %sx%s", image.width(), image.height())
            self._output_message(DONE_MESSAGE)
        finally:
            self.state._set_running(False)

    def _output_message(self, message: str) -> None:
        self.state._append_output(message)

    def close(self) -> None:
        """Release the fetcher's worker pool if this controller created it."""
        if self._fetcher_owned:
            self.fetcher.close()
