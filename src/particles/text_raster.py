"""
Text to sample points.
Renders a string into an off-screen bitmap and samples the ink on a grid.
"""
from typing import List, Optional, Tuple

import cv2
import numpy as np

from session.config import TextConfig


FONT = cv2.FONT_HERSHEY_DUPLEX

# Cap height of a CSS-style pixel font size
CAP_HEIGHT_RATIO = 0.72


class TextRaster:
    """
    Rasterizes text with OpenCV's Hershey fonts.

    Long strings with spaces are greedily wrapped to fit max_width_ratio of
    the viewport; single unbroken tokens are left to overflow. The block of
    lines is centred in the viewport.
    """

    def __init__(self, config: Optional[TextConfig] = None):
        self._config = config or TextConfig()

    def is_narrow(self, width: int) -> bool:
        return width < self._config.mobile_breakpoint

    def font_size_for(self, width: int) -> float:
        """Pixel font size for a viewport width."""
        if self.is_narrow(width):
            return min(width * 0.14, 60.0)
        return min(width * 0.08, 100.0)

    def grid_step_for(self, width: int) -> int:
        if self.is_narrow(width):
            return self._config.mobile_grid_step
        return self._config.grid_step

    def _font_params(self, font_size: float) -> Tuple[float, int]:
        """OpenCV (scale, thickness) approximating a bold font of font_size px."""
        thickness = max(1, int(round(font_size / 12)))
        (_, cap), _ = cv2.getTextSize("H", FONT, 1.0, thickness)
        scale = font_size * CAP_HEIGHT_RATIO / max(1, cap)
        return scale, thickness

    def measure(self, text: str, font_size: float) -> int:
        """Rendered width of a single line in pixels."""
        if not text:
            return 0
        scale, thickness = self._font_params(font_size)
        (w, _), _ = cv2.getTextSize(text, FONT, scale, thickness)
        return w

    def layout_lines(self, text: str, font_size: float, max_width: float) -> List[str]:
        """Split text into lines no wider than max_width where word breaks allow."""
        if not text:
            return []
        if self.measure(text, font_size) <= max_width or ' ' not in text:
            return [text]

        lines = []
        line = ""
        for word in text.split():
            candidate = f"{line} {word}" if line else word
            if line and self.measure(candidate, font_size) > max_width:
                lines.append(line)
                line = word
            else:
                line = candidate
        if line:
            lines.append(line)
        return lines

    def render(self, text: str, font_size: float, width: int, height: int) -> np.ndarray:
        """Render text into a (height, width) uint8 coverage bitmap."""
        canvas = np.zeros((height, width), dtype=np.uint8)
        lines = self.layout_lines(text, font_size, width * self._config.max_width_ratio)
        if not lines:
            return canvas

        scale, thickness = self._font_params(font_size)
        line_height = font_size * self._config.line_height
        start_y = height / 2 - (len(lines) - 1) * line_height / 2

        for i, line in enumerate(lines):
            (w, h), _ = cv2.getTextSize(line, FONT, scale, thickness)
            # Middle baseline: the line's cap height is centred on its row
            x = int(round(width / 2 - w / 2))
            y = int(round(start_y + i * line_height + h / 2))
            cv2.putText(canvas, line, (x, y), FONT, scale, 255, thickness, cv2.LINE_AA)

        return canvas

    def sample(
        self,
        text: str,
        width: int,
        height: int,
        font_size: Optional[float] = None,
    ) -> List[Tuple[int, int]]:
        """
        Sample glyph-ink pixels of text rendered in a width x height viewport.

        Args:
            text: String to render
            width: Viewport width in pixels
            height: Viewport height in pixels
            font_size: Pixel font size (defaults to the viewport's size)

        Returns:
            List of (x, y) integer points on the sampling grid. Empty when the
            text is empty or leaves no ink above the alpha threshold.
        """
        if not text or width <= 0 or height <= 0:
            return []

        if font_size is None:
            font_size = self.font_size_for(width)

        mask = self.render(text, font_size, width, height)
        step = self.grid_step_for(width)
        ys, xs = np.nonzero(mask[::step, ::step] > self._config.alpha_threshold)
        return list(zip((xs * step).tolist(), (ys * step).tolist()))
