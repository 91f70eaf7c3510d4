"""
QPainter implementation of the particle drawing backend.
"""
from typing import Sequence, Tuple
from PyQt5.QtCore import Qt, QPointF, QRectF
from PyQt5.QtGui import QPainter, QColor, QBrush, QRadialGradient

from particles.backend import Color, DrawingBackend, GradientStop


def _qcolor(r: int, g: int, b: int, alpha: float) -> QColor:
    a = max(0, min(255, int(round(alpha * 255))))
    return QColor(r, g, b, a)


class QtPainterBackend(DrawingBackend):
    """Draws onto an active QPainter (valid for one paintEvent)."""

    def __init__(self, painter: QPainter):
        self._painter = painter
        self._painter.setPen(Qt.NoPen)

    def fill_disk(self, x: float, y: float, radius: float, color: Color, alpha: float) -> None:
        if radius <= 0 or alpha <= 0:
            return
        self._painter.setBrush(_qcolor(*color, alpha))
        self._painter.drawEllipse(QPointF(x, y), radius, radius)

    def fill_radial_gradient(
        self,
        rect: Tuple[float, float, float, float],
        center: Tuple[float, float],
        radius: float,
        stops: Sequence[GradientStop],
        opacity: float = 1.0,
    ) -> None:
        if radius <= 0:
            return
        gradient = QRadialGradient(QPointF(*center), radius)
        for position, (r, g, b, a) in stops:
            gradient.setColorAt(position, _qcolor(r, g, b, a))

        self._painter.save()
        self._painter.setOpacity(opacity)
        self._painter.fillRect(QRectF(*rect), QBrush(gradient))
        self._painter.restore()
