"""
Background worker for MediaPipe hand tracking.
Runs in a separate QThread so detection never blocks the draw loop.
"""
import time
from typing import Optional
from PyQt5.QtCore import QObject, pyqtSignal

from .hand_tracker import HandTracker


CAMERA_ERROR = "Camera access denied. Please allow camera and restart."


class WebcamWorker(QObject):
    """
    Detector producer. Every processed camera frame is emitted as one
    hands_detected batch (an empty list when no hand is visible); the
    receiver connects with Qt.QueuedConnection so batches are consumed on
    the UI thread between draw ticks.
    """
    # Signals
    hands_detected = pyqtSignal(object)  # Emits List[HandLandmarks]
    tracking_started = pyqtSignal()
    error = pyqtSignal(str)
    finished = pyqtSignal()

    def __init__(self, config, parent=None):
        super().__init__(parent)
        self._config = config
        self._tracker: Optional[HandTracker] = None
        self._is_running = False

    def start_process(self):
        """Main processing loop. Runs in the worker thread."""
        self._tracker = HandTracker(self._config)

        try:
            with self._tracker:
                if not self._tracker.start():
                    # Setup failure is terminal: report once, no retry
                    self.error.emit(CAMERA_ERROR)
                    return

                self._is_running = True
                self.tracking_started.emit()

                while self._is_running:
                    hands = self._tracker.get_hands()
                    if hands is None:
                        time.sleep(0.01)
                        continue
                    self.hands_detected.emit(hands)

        except Exception as e:
            self.error.emit(f"Worker Exception: {str(e)}")
        finally:
            self._is_running = False
            self.finished.emit()

    def stop_process(self):
        """Signal the loop to stop; resources are released in the worker thread."""
        self._is_running = False
