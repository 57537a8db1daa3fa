"""Qt implementation of the boundary a proctored session runs in."""

from __future__ import annotations

from collections.abc import Callable
import logging

from PySide6.QtCore import QEvent, QObject, Qt, QTimer, Signal
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication, QWidget

from quiz_proctor.constants.quiz_constants import CLOCK_TICK_INTERVAL_MS
from quiz_proctor.core.models import ViolationKind

logger = logging.getLogger(__name__)


class QtSessionEnvironment(QObject):
    """Maps window focus and fullscreen changes onto the session's signals.

    Focus loss is the application leaving ``ApplicationActive``; fullscreen
    loss is a window state change that drops ``WindowFullScreen``.
    """

    ticked = Signal()
    violation_detected = Signal(str)

    def __init__(self, window: QWidget, tick_interval_ms: int = CLOCK_TICK_INTERVAL_MS) -> None:
        super().__init__(window)
        self._window = window
        self._tick_interval_ms = tick_interval_ms
        self._on_focus_lost: Callable[[], None] | None = None
        self._on_fullscreen_lost: Callable[[], None] | None = None
        self._on_fullscreen_entered: Callable[[], None] | None = None

    def request_fullscreen(self) -> bool:
        self._window.showFullScreen()
        QApplication.processEvents()
        return bool(self._window.windowState() & Qt.WindowFullScreen)

    def subscribe(
        self,
        on_focus_lost: Callable[[], None],
        on_fullscreen_lost: Callable[[], None],
        on_fullscreen_entered: Callable[[], None],
    ) -> Callable[[], None]:
        self._on_focus_lost = on_focus_lost
        self._on_fullscreen_lost = on_fullscreen_lost
        self._on_fullscreen_entered = on_fullscreen_entered
        app = QGuiApplication.instance()
        app.applicationStateChanged.connect(self._handle_application_state)
        self._window.installEventFilter(self)
        logger.debug("Proctoring subscriptions added")

        def unsubscribe() -> None:
            app.applicationStateChanged.disconnect(self._handle_application_state)
            self._window.removeEventFilter(self)
            self._on_focus_lost = None
            self._on_fullscreen_lost = None
            self._on_fullscreen_entered = None
            logger.debug("Proctoring subscriptions removed")

        return unsubscribe

    def start_ticker(self, on_tick: Callable[[], None]) -> Callable[[], None]:
        timer = QTimer(self)
        timer.setInterval(self._tick_interval_ms)

        def handle_timeout() -> None:
            on_tick()
            self.ticked.emit()

        timer.timeout.connect(handle_timeout)
        timer.start()

        def stop() -> None:
            timer.stop()
            timer.timeout.disconnect(handle_timeout)
            timer.deleteLater()

        return stop

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self._window and event.type() == QEvent.WindowStateChange:
            if self._window.windowState() & Qt.WindowFullScreen:
                if self._on_fullscreen_entered is not None:
                    self._on_fullscreen_entered()
            elif self._on_fullscreen_lost is not None:
                self._on_fullscreen_lost()
                self.violation_detected.emit(ViolationKind.FULLSCREEN_EXIT.value)
        return super().eventFilter(watched, event)

    def _handle_application_state(self, state: Qt.ApplicationState) -> None:
        if state == Qt.ApplicationState.ApplicationActive or self._on_focus_lost is None:
            return
        self._on_focus_lost()
        self.violation_detected.emit(ViolationKind.TAB_SWITCH.value)
