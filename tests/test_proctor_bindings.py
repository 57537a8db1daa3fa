from __future__ import annotations

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
pytest.importorskip("PySide6.QtWidgets")
pytest.importorskip("PySide6.QtWebEngineWidgets")

from PySide6.QtCore import QEvent, Qt  # noqa: E402
from PySide6.QtTest import QTest  # noqa: E402
from PySide6.QtWidgets import QApplication, QWidget  # noqa: E402

from quiz_proctor.ui.proctor_bindings import QtSessionEnvironment  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    return QApplication.instance() or QApplication([])


@pytest.fixture
def window(qapp):
    widget = QWidget()
    yield widget
    widget.deleteLater()


def _subscribe(environment: QtSessionEnvironment, calls: list[str]):
    return environment.subscribe(
        lambda: calls.append("focus_lost"),
        lambda: calls.append("fullscreen_lost"),
        lambda: calls.append("fullscreen_entered"),
    )


def test_focus_loss_is_reported_until_unsubscribed(qapp, window):
    environment = QtSessionEnvironment(window)
    calls, signalled = [], []
    environment.violation_detected.connect(signalled.append)
    unsubscribe = _subscribe(environment, calls)

    qapp.applicationStateChanged.emit(Qt.ApplicationState.ApplicationInactive)
    qapp.applicationStateChanged.emit(Qt.ApplicationState.ApplicationActive)
    assert calls == ["focus_lost"]
    assert signalled == ["tab_switch"]

    unsubscribe()
    qapp.applicationStateChanged.emit(Qt.ApplicationState.ApplicationInactive)
    assert calls == ["focus_lost"]
    assert signalled == ["tab_switch"]


def test_leaving_fullscreen_is_reported_until_unsubscribed(qapp, window):
    environment = QtSessionEnvironment(window)
    calls, signalled = [], []
    environment.violation_detected.connect(signalled.append)
    unsubscribe = _subscribe(environment, calls)

    QApplication.sendEvent(window, QEvent(QEvent.Type.WindowStateChange))
    assert calls == ["fullscreen_lost"]
    assert signalled == ["fullscreen_exit"]

    unsubscribe()
    QApplication.sendEvent(window, QEvent(QEvent.Type.WindowStateChange))
    assert calls == ["fullscreen_lost"]


def test_ticker_stops(qapp, window):
    environment = QtSessionEnvironment(window, tick_interval_ms=5)
    ticks, signalled = [], []
    environment.ticked.connect(lambda: signalled.append(1))
    stop = environment.start_ticker(lambda: ticks.append(1))

    QTest.qWait(100)
    assert ticks
    assert len(signalled) == len(ticks)

    stop()
    seen = len(ticks)
    QTest.qWait(50)
    assert len(ticks) == seen
