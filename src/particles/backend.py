"""
Drawing backend interface.

The particle field only ever fills disks and rectangles with radial
gradients; any surface that can do those two things can render it.
"""
from abc import ABC, abstractmethod
from typing import Sequence, Tuple

Color = Tuple[int, int, int]
# (position 0..1, (r, g, b, a 0..1))
GradientStop = Tuple[float, Tuple[int, int, int, float]]


class DrawingBackend(ABC):
    """Minimal 2D drawing surface."""

    @abstractmethod
    def fill_disk(self, x: float, y: float, radius: float, color: Color, alpha: float) -> None:
        """Fill a circle centred at (x, y)."""

    @abstractmethod
    def fill_radial_gradient(
        self,
        rect: Tuple[float, float, float, float],
        center: Tuple[float, float],
        radius: float,
        stops: Sequence[GradientStop],
        opacity: float = 1.0,
    ) -> None:
        """Fill rect (x, y, w, h) with a radial gradient around center."""
