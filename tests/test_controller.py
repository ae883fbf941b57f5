from __future__ import annotations

import asyncio

import httpx
import pytest
from PySide6.QtGui import QImage

from thumbnail_demo.config import DEMO_URL, FetchConfig
from thumbnail_demo.controller import DONE_MESSAGE, ERROR_MESSAGE, RUNNING_MESSAGE, RunController
from thumbnail_demo.errors import InvalidImageError, UnexpectedResponseError
from thumbnail_demo.fetcher import ThumbnailFetcher


class _FakeFetcher:
    """Records calls and replays queued outcomes (QImage or exception)."""

    def __init__(self, *outcomes) -> None:
        self.config = FetchConfig(startup_delay_ms=0)
        self.outcomes = list(outcomes)
        self.urls: list[str] = []
        self.running_during_fetch: list[bool] = []
        self.controller: RunController | None = None

    async def fetch(self, url: str) -> QImage:
        self.urls.append(url)
        if self.controller is not None:
            self.running_during_fetch.append(self.controller.state.running)
        await asyncio.sleep(0)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def _image(w: int = 60, h: int = 30) -> QImage:
    return QImage(w, h, QImage.Format.Format_RGB888)


def _controller(*outcomes) -> tuple[RunController, _FakeFetcher]:
    fake = _FakeFetcher(*outcomes)
    controller = RunController(fake)  # type: ignore[arg-type]
    fake.controller = controller
    return controller, fake


def test_initial_state_is_idle_and_empty():
    controller, _ = _controller()
    assert controller.state.running is False
    assert controller.state.output == []
    assert controller.state.image is None


def test_successful_run_logs_running_then_done_and_sets_image():
    image = _image()
    controller, fake = _controller(image)

    asyncio.run(controller.run())

    assert controller.state.output == [RUNNING_MESSAGE, DONE_MESSAGE]
    assert controller.state.image is image
    assert controller.state.running is False
    assert fake.urls == [DEMO_URL]
    assert fake.running_during_fetch == [True]


@pytest.mark.parametrize(
    "error",
    [UnexpectedResponseError(404), InvalidImageError("bad bytes"), RuntimeError("anything else")],
)
def test_failed_run_logs_one_generic_error(error):
    controller, fake = _controller(error)

    asyncio.run(controller.run())

    assert controller.state.output == ["Running...", "Ooops, got an error!", "Done!"]
    assert controller.state.image is None
    assert controller.state.running is False
    assert fake.running_during_fetch == [True]


def test_failed_run_keeps_previous_image():
    first = _image()
    controller, _ = _controller(first, InvalidImageError("broken"))

    asyncio.run(controller.run())
    asyncio.run(controller.run())

    assert controller.state.image is first
    assert controller.state.output == [
        RUNNING_MESSAGE,
        DONE_MESSAGE,
        RUNNING_MESSAGE,
        ERROR_MESSAGE,
        DONE_MESSAGE,
    ]


def test_every_run_is_a_fresh_attempt():
    a, b = _image(10, 10), _image(20, 10)
    controller, fake = _controller(a, b)

    asyncio.run(controller.run())
    asyncio.run(controller.run())

    assert len(fake.urls) == 2
    assert controller.state.image is b


def test_state_signals_follow_run_order():
    image = _image()
    controller, _ = _controller(image)
    events: list[tuple[str, object]] = []
    controller.state.runningChanged.connect(lambda v: events.append(("running", v)))
    controller.state.outputChanged.connect(lambda: events.append(("output", controller.state.output[-1])))
    controller.state.imageChanged.connect(lambda img: events.append(("image", isinstance(img, QImage))))

    asyncio.run(controller.run())

    assert events == [
        ("running", True),
        ("output", RUNNING_MESSAGE),
        ("image", True),
        ("output", DONE_MESSAGE),
        ("running", False),
    ]


def test_running_is_reset_when_run_is_cancelled():
    class _Hanging(_FakeFetcher):
        async def fetch(self, url: str) -> QImage:
            await asyncio.Event().wait()
            raise AssertionError("unreachable")

    fake = _Hanging()
    controller = RunController(fake)  # type: ignore[arg-type]

    async def main():
        task = asyncio.ensure_future(controller.run())
        await asyncio.sleep(0)
        assert controller.state.running is True
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(main())
    assert controller.state.running is False
    assert controller.state.output == [RUNNING_MESSAGE]


def test_url_override():
    controller, fake = _controller(_image())
    controller.url = "https://example.test/other.png"
    asyncio.run(controller.run())
    assert fake.urls == ["https://example.test/other.png"]


def test_run_with_real_fetcher_and_http_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    config = FetchConfig(url="https://example.test/missing.png", startup_delay_ms=0)
    fetcher = ThumbnailFetcher(config, transport=transport)
    controller = RunController(fetcher)
    try:
        asyncio.run(controller.run())
    finally:
        fetcher.close()
    assert controller.state.output == [RUNNING_MESSAGE, ERROR_MESSAGE, DONE_MESSAGE]
    assert controller.state.image is None
    assert controller.state.running is False


def test_run_with_real_fetcher_success(make_png):
    pytest.importorskip("pyvips")
    payload = make_png(1200, 400)
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=payload))
    fetcher = ThumbnailFetcher(FetchConfig(startup_delay_ms=0), transport=transport)
    controller = RunController(fetcher)
    try:
        asyncio.run(controller.run())
    finally:
        fetcher.close()
    assert controller.state.output == [RUNNING_MESSAGE, DONE_MESSAGE]
    assert (controller.state.image.width(), controller.state.image.height()) == (600, 200)


def test_close_shuts_down_owned_fetcher():
    controller = RunController(config=FetchConfig(startup_delay_ms=0))
    executor = controller.fetcher._worker.executor
    controller.close()
    with pytest.raises(RuntimeError):
        executor.submit(lambda: None)


def test_close_leaves_injected_fetcher_alone():
    fetcher = ThumbnailFetcher(FetchConfig(startup_delay_ms=0))
    controller = RunController(fetcher)
    try:
        controller.close()
        assert fetcher._worker.executor.submit(lambda: 7).result(timeout=5) == 7
    finally:
        fetcher.close()
