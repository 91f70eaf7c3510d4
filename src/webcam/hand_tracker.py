"""
MediaPipe Hand Tracker wrapper using the Tasks API.
Handles camera capture and multi-hand landmark detection.
"""
from pathlib import Path
from typing import Optional, List
import time
import cv2
import numpy as np
import mediapipe as mp

from gestures.landmarks import HandLandmarks, HAND_CONNECTIONS
from session.config import Config, CameraConfig, MediaPipeConfig

# MediaPipe Tasks API imports
BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

MODEL_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"


class HandTracker:
    """
    MediaPipe hand tracking wrapper with camera management.
    Uses the MediaPipe Tasks API (0.10+) in VIDEO mode.

    Can be used as a context manager so the camera and the landmarker are
    released even when the caller's loop raises.
    """

    # Default model path relative to project root
    DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent / "models" / "hand_landmarker.task"

    def __init__(self, config: Config, model_path: Optional[Path] = None):
        """
        Initialize hand tracker.

        Args:
            config: Galaxy Hands configuration
            model_path: Path to hand_landmarker.task model file
        """
        self._camera_config: CameraConfig = config.camera
        self._mp_config: MediaPipeConfig = config.mediapipe
        configured = self._mp_config.model_path
        self._model_path = Path(model_path or configured or self.DEFAULT_MODEL_PATH)

        # Lazy initialization
        self._cap: Optional[cv2.VideoCapture] = None
        self._landmarker: Optional[HandLandmarker] = None

        # State
        self._is_running = False
        self._last_frame: Optional[np.ndarray] = None
        self._frame_count = 0
        self._start_perf: float = 0
        self._last_timestamp_ms: int = -1

    def __enter__(self) -> "HandTracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def start(self) -> bool:
        """
        Start camera capture and MediaPipe.

        Returns:
            True if started successfully, False otherwise.
        """
        if self._is_running:
            return True

        if not self._model_path.exists():
            print(f"ERROR: Model file not found: {self._model_path}")
            print(f"Download from: {MODEL_URL}")
            return False

        self._cap = cv2.VideoCapture(self._camera_config.device_id)
        if not self._cap.isOpened():
            print(f"ERROR: Could not open camera {self._camera_config.device_id}")
            self._cap.release()
            self._cap = None
            return False

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._camera_config.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._camera_config.height)
        self._cap.set(cv2.CAP_PROP_FPS, self._camera_config.fps)

        # model_complexity has no Tasks API equivalent; the .task bundle fixes it
        options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(self._model_path)),
            running_mode=VisionRunningMode.VIDEO,
            num_hands=self._mp_config.max_num_hands,
            min_hand_detection_confidence=self._mp_config.min_detection_confidence,
            min_tracking_confidence=self._mp_config.min_tracking_confidence,
        )

        self._landmarker = HandLandmarker.create_from_options(options)
        self._start_perf = time.perf_counter()
        self._last_timestamp_ms = -1
        self._is_running = True
        print(f"Hand tracker started (camera {self._camera_config.device_id}, "
              f"{self._mp_config.max_num_hands} hands)")
        return True

    def stop(self) -> None:
        """Stop camera capture and release resources."""
        self._is_running = False

        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None

        if self._cap:
            self._cap.release()
            self._cap = None

        self._last_frame = None

    def get_hands(self) -> Optional[List[HandLandmarks]]:
        """
        Capture a frame and detect every visible hand.

        Returns:
            List of hands (empty when none is visible), or None when no
            frame could be read.
        """
        if not self._is_running or self._cap is None or self._landmarker is None:
            return None

        ret, frame = self._cap.read()
        if not ret:
            return None

        self._frame_count += 1

        if self._camera_config.mirror:
            frame = cv2.flip(frame, 1)
        self._last_frame = frame

        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        # Calculate strictly monotonic timestamp
        timestamp_ms = int((time.perf_counter() - self._start_perf) * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms

        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)

        hands = []
        for hand_landmarks, handedness in zip(result.hand_landmarks, result.handedness):
            hands.append(HandLandmarks(
                landmarks=[(lm.x, lm.y, lm.z) for lm in hand_landmarks],
                handedness=handedness[0].category_name,
                confidence=handedness[0].score,
            ))
        return hands

    def get_frame_with_landmarks(
        self,
        hands: Optional[List[HandLandmarks]] = None,
    ) -> Optional[np.ndarray]:
        """
        Get last frame with optional landmark overlay for debugging.

        Args:
            hands: If provided, draw each hand's landmarks on the frame.

        Returns:
            Frame with landmarks drawn, or None if no frame available.
        """
        if self._last_frame is None:
            return None

        frame = self._last_frame.copy()
        h, w = frame.shape[:2]

        for hand in hands or []:
            for x, y, _ in hand.landmarks:
                cv2.circle(frame, (int(x * w), int(y * h)), 5, (0, 255, 0), -1)

            for start_idx, end_idx in HAND_CONNECTIONS:
                start = hand.landmarks[start_idx]
                end = hand.landmarks[end_idx]
                cv2.line(
                    frame,
                    (int(start[0] * w), int(start[1] * h)),
                    (int(end[0] * w), int(end[1] * h)),
                    (0, 255, 0), 2,
                )

        return frame

    @property
    def frame_count(self) -> int:
        return self._frame_count
