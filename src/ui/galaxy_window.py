"""
Galaxy window - full-viewport particle canvas with status labels.
"""
from typing import List, Optional
from PyQt5.QtWidgets import QApplication, QWidget, QLabel, QVBoxLayout
from PyQt5.QtCore import Qt, QTimer, pyqtSignal
from PyQt5.QtGui import QPainter

from gestures.landmarks import HandLandmarks
from session.config import Config
from session.orchestrator import Orchestrator, LOADING_STATUS, NO_HAND_STATUS
from .qt_backend import QtPainterBackend


DEFAULT_THEME = """
QLabel#CornerLabel {
    color: rgba(240, 240, 255, 230);
    font: bold 28px "Segoe UI", Arial, sans-serif;
}
QLabel#GestureLabel {
    color: rgba(230, 235, 255, 200);
    font: 18px "Segoe UI", Arial, sans-serif;
    letter-spacing: 2px;
}
QLabel#SpellingLabel {
    color: rgba(255, 255, 255, 230);
    font: bold 22px "Segoe UI", Arial, sans-serif;
}
QLabel#StatusLabel {
    color: rgba(220, 225, 255, 220);
    background: rgba(10, 10, 30, 160);
    border-radius: 12px;
    padding: 8px 18px;
    font: 16px "Segoe UI", Arial, sans-serif;
}
"""


class GalaxyWindow(QWidget):
    """
    Hosts the fixed-cadence draw loop.

    A QTimer fires once per frame: the orchestrator ticks, then the widget
    repaints through QtPainterBackend. Detector batches are delivered to
    on_hands() on the same (UI) thread via queued signals.
    """

    closed = pyqtSignal()

    def __init__(self, config: Config, parent=None):
        super().__init__(parent)
        self._config = config
        ui = config.ui

        self.setObjectName("GalaxyWindow")
        self.setWindowTitle(ui.window_title)
        self.setAttribute(Qt.WA_OpaquePaintEvent)
        self.setFocusPolicy(Qt.StrongFocus)

        width, height = self._initial_size()
        self.resize(width, height)

        self.orchestrator = Orchestrator(
            config,
            width,
            height,
            on_status=self.set_status,
            on_gesture=self.set_gesture_label,
            on_spelling=self.set_spelling,
        )

        self._setup_ui()
        self.setStyleSheet(DEFAULT_THEME)
        self.set_status(LOADING_STATUS)

        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.timeout.connect(self._on_frame)
        self._timer.start(max(1, int(1000 / max(1, ui.fps))))

    def _initial_size(self):
        """Window size the particle pool is sized for."""
        ui = self._config.ui
        screen = QApplication.primaryScreen()
        if ui.fullscreen and screen is not None:
            geo = screen.geometry()
            return geo.width(), geo.height()
        return ui.width, ui.height

    def _setup_ui(self):
        """Build the overlay labels."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 20, 24, 40)
        layout.setSpacing(8)

        self.corner_label = QLabel(self._config.ui.corner_label)
        self.corner_label.setObjectName("CornerLabel")
        self.corner_label.setVisible(bool(self._config.ui.corner_label))
        layout.addWidget(self.corner_label, 0, Qt.AlignLeft)

        self.gesture_label = QLabel("")
        self.gesture_label.setObjectName("GestureLabel")
        layout.addWidget(self.gesture_label, 0, Qt.AlignHCenter)

        self.spelling_label = QLabel("")
        self.spelling_label.setObjectName("SpellingLabel")
        self.spelling_label.setVisible(False)
        layout.addWidget(self.spelling_label, 0, Qt.AlignHCenter)

        layout.addStretch()

        self.status_label = QLabel("")
        self.status_label.setObjectName("StatusLabel")
        layout.addWidget(self.status_label, 0, Qt.AlignHCenter)

        for label in (self.corner_label, self.gesture_label,
                      self.spelling_label, self.status_label):
            label.setAttribute(Qt.WA_TransparentForMouseEvents)

    # ------------------------------------------------------------------
    # Status surface
    # ------------------------------------------------------------------

    def set_status(self, message: str):
        self.status_label.setText(message)
        self.status_label.setVisible(bool(message))

    def set_gesture_label(self, text: str):
        self.gesture_label.setText(text)

    def set_spelling(self, text: str):
        self.spelling_label.setText(text)
        self.spelling_label.setVisible(bool(text))

    def show_error(self, message: str):
        """Terminal setup error: shown once, never retried."""
        print(f"ERROR: {message}")
        self.set_status(message)

    # ------------------------------------------------------------------
    # Detector input
    # ------------------------------------------------------------------

    def on_hands(self, hands: Optional[List[HandLandmarks]]):
        self.orchestrator.on_hands(hands or [])

    def on_tracking_started(self):
        self.set_status(NO_HAND_STATUS)

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def _on_frame(self):
        self.orchestrator.tick()
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        try:
            self.orchestrator.draw(QtPainterBackend(painter))
        finally:
            painter.end()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if hasattr(self, 'orchestrator'):
            self.orchestrator.resize(self.width(), self.height())

    def keyPressEvent(self, event):
        if event.key() in (Qt.Key_Escape, Qt.Key_Q):
            self.close()
        else:
            super().keyPressEvent(event)

    def closeEvent(self, event):
        """Stop the loop cleanly: no ticks run after this returns."""
        self._timer.stop()
        self.orchestrator.stop()
        self.closed.emit()
        super().closeEvent(event)
