"""
Galaxy Hands UI Module

PyQt5 window and painter backend for the particle field.
"""
from .qt_backend import QtPainterBackend
from .galaxy_window import GalaxyWindow

__all__ = [
    'QtPainterBackend',
    'GalaxyWindow',
]
