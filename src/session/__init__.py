"""
Galaxy Hands Session Module

Configuration and the orchestrator wiring gestures into the particle field.
The orchestrator lives in session.orchestrator; it is not imported here so
that the particle and gesture packages can depend on session.config alone.
"""
from .config import (
    Config,
    CameraConfig,
    MediaPipeConfig,
    GestureConfig,
    ParticleConfig,
    TextConfig,
    UIConfig,
    load_config,
)

__all__ = [
    'Config',
    'CameraConfig',
    'MediaPipeConfig',
    'GestureConfig',
    'ParticleConfig',
    'TextConfig',
    'UIConfig',
    'load_config',
]
