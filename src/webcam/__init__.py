"""
Galaxy Hands Webcam Module

Camera capture and hand landmark detection using MediaPipe.
"""
from .hand_tracker import HandTracker
from .worker import WebcamWorker, CAMERA_ERROR

__all__ = [
    'HandTracker',
    'WebcamWorker',
    'CAMERA_ERROR',
]
