from __future__ import annotations

from PySide6.QtCore import Property, QObject, Signal
from PySide6.QtGui import QImage

from thumbnail_demo.run_log import RunLog


class RunState(QObject):
    """State bound by the run screen: log lines, latest thumbnail, busy flag."""

    # Payload-free: views read `output`, which only ever grows
    outputChanged = Signal()
    imageChanged = Signal(object)
    runningChanged = Signal(bool)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._log = RunLog(on_append=self._on_log_append)
        self._image: QImage | None = None
        self._running = False

    # ---- read-only properties (mutate via RunController) ----
    def _get_output(self) -> list:
        return self._log.snapshot()

    output = Property(list, _get_output, notify=outputChanged)  # type: ignore[arg-type]

    def _get_image(self) -> object:
        return self._image

    image = Property(object, _get_image, notify=imageChanged)  # type: ignore[arg-type]

    def _get_running(self) -> bool:
        return bool(self._running)

    running = Property(bool, _get_running, notify=runningChanged)  # type: ignore[arg-type]

    @property
    def log(self) -> RunLog:
        return self._log

    # ---- internal mutation helpers (called by RunController) ----
    def _on_log_append(self, _line: str) -> None:
        self.outputChanged.emit()

    def _append_output(self, line: str) -> None:
        self._log.append(line)

    def _set_image(self, image: QImage | None) -> None:
        if image is self._image:
            return
        self._image = image
        self.imageChanged.emit(image)

    def _set_running(self, running: bool) -> None:
        v = bool(running)
        if v == self._running:
            return
        self._running = v
        self.runningChanged.emit(v)
