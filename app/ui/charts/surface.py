from __future__ import annotations

from typing import Optional, Tuple

import pyqtgraph as pg
from PyQt6.QtCore import QPointF, QRectF, QSize, Qt
from PyQt6.QtGui import QColor, QFont, QFontMetricsF, QImage, QPainter, QPen
from PyQt6.QtWidgets import QSizePolicy, QWidget

from ..theme import theme


def make_font(pixel_size: int, bold: bool = False) -> QFont:
    font = QFont()
    font.setFamily('sans-serif')
    font.setPixelSize(int(pixel_size))
    font.setBold(bold)
    return font


def dashed_pen(color: str, width: float = 1.0) -> QPen:
    pen = pg.mkPen(QColor(color), width=width)
    pen.setStyle(Qt.PenStyle.CustomDashLine)
    pen.setDashPattern([2.0, 2.0])
    return pen


def draw_text(painter: QPainter, x: float, y: float, text: str, align: str = 'left') -> None:
    """Draw ``text`` with its baseline at ``y``; ``align`` anchors ``x`` like a canvas textAlign."""
    if not text:
        return
    metrics = QFontMetricsF(painter.font())
    advance = metrics.horizontalAdvance(text)
    if align == 'center':
        x -= advance / 2.0
    elif align == 'right':
        x -= advance
    painter.drawText(QPointF(x, y), text)


def new_surface(size: Tuple[int, int]) -> QImage:
    width, height = size
    image = QImage(int(width), int(height), QImage.Format.Format_ARGB32_Premultiplied)
    image.fill(QColor(theme.SURFACE))
    return image


def surface_point(pos: QPointF, display_rect: QRectF, surface_size: Tuple[int, int]) -> Optional[QPointF]:
    """Map a widget position onto logical surface pixels, undoing display scaling."""
    if display_rect.width() <= 0 or display_rect.height() <= 0:
        return None
    scale_x = surface_size[0] / display_rect.width()
    scale_y = surface_size[1] / display_rect.height()
    return QPointF((pos.x() - display_rect.left()) * scale_x, (pos.y() - display_rect.top()) * scale_y)


def widget_point(point: QPointF, display_rect: QRectF, surface_size: Tuple[int, int]) -> QPointF:
    scale_x = display_rect.width() / surface_size[0]
    scale_y = display_rect.height() / surface_size[1]
    return QPointF(display_rect.left() + point.x() * scale_x, display_rect.top() + point.y() * scale_y)


class SurfaceWidget(QWidget):
    """
    Shows a fixed-size raster surface scaled to the widget width.

    Subclasses implement ``_paint_surface(painter)``; ``redraw()`` clears the
    surface and repaints it from scratch.
    """

    def __init__(self, surface_size: Tuple[int, int], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.surface_size: Tuple[int, int] = (int(surface_size[0]), int(surface_size[1]))
        self._image = new_surface(self.surface_size)
        policy = QSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        policy.setHeightForWidth(True)
        self.setSizePolicy(policy)
        self.setMinimumSize(self.surface_size[0] // 4, self.surface_size[1] // 4)

    @property
    def image(self) -> QImage:
        return self._image

    def sizeHint(self) -> QSize:
        return QSize(*self.surface_size)

    def hasHeightForWidth(self) -> bool:
        return True

    def heightForWidth(self, width: int) -> int:
        return int(round(width * self.surface_size[1] / self.surface_size[0]))

    def display_rect(self) -> QRectF:
        """Largest rect with the surface aspect ratio that fits the widget, top-aligned."""
        w = float(self.width())
        h = float(self.height())
        sw, sh = self.surface_size
        if w <= 0 or h <= 0:
            return QRectF()
        scale = min(w / sw, h / sh)
        dw = sw * scale
        dh = sh * scale
        return QRectF((w - dw) / 2.0, 0.0, dw, dh)

    def redraw(self) -> None:
        self._image.fill(QColor(theme.SURFACE))
        painter = QPainter(self._image)
        try:
            self._paint_surface(painter)
        finally:
            painter.end()
        self.update()

    def _paint_surface(self, painter: QPainter) -> None:
        raise NotImplementedError

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
            painter.drawImage(self.display_rect(), self._image)
        finally:
            painter.end()

    def export_png(self, path: str) -> bool:
        return self._image.save(path, 'PNG')
