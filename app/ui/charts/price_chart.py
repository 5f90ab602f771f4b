from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

import pyqtgraph as pg
from PyQt6.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QImage, QPainter
from PyQt6.QtWidgets import QWidget

from core.config import (
    BAR_GAP,
    CHART_PADDING,
    CURRENT_LABEL,
    FLAT_RANGE_RATIO,
    GRID_INTERVALS,
    HIGH_PRICE_RATIO,
    MID_PRICE_RATIO,
    PRICE_CHART_SIZE,
    PRICE_CHART_TITLE,
    TIME_LABEL_STRIDE,
)
from core.models import PriceSample
from core.price_series import find_current, format_hour, local_now, sort_by_start
from ..theme import theme
from .surface import SurfaceWidget, dashed_pen, draw_text, make_font, new_surface, widget_point


class PriceChartGeometry:
    """Pixel layout of the bar chart for one series on one surface size."""

    def __init__(
        self,
        prices: Sequence[float],
        size: Tuple[int, int] = PRICE_CHART_SIZE,
        padding: float = CHART_PADDING,
    ) -> None:
        self.width = float(size[0])
        self.height = float(size[1])
        self.padding = float(padding)
        self.prices: List[float] = [float(p) for p in prices]
        self.count = len(self.prices)
        self.min_price = min(self.prices) if self.prices else 0.0
        self.max_price = max(self.prices) if self.prices else 0.0
        self.price_range = self.max_price - self.min_price
        self.plot_width = max(0.0, self.width - self.padding * 2)
        self.plot_height = max(0.0, self.height - self.padding * 2)
        self.bar_width = self.plot_width / self.count if self.count else 0.0

    @property
    def baseline_y(self) -> float:
        return self.height - self.padding

    @property
    def plot_rect(self) -> QRectF:
        return QRectF(self.padding, self.padding, self.plot_width, self.plot_height)

    def ratio(self, price: float) -> float:
        if self.price_range <= 0:
            return FLAT_RANGE_RATIO
        return (price - self.min_price) / self.price_range

    def bar_rect(self, index: int) -> QRectF:
        x = self.padding + index * self.bar_width
        bar_height = self.ratio(self.prices[index]) * self.plot_height
        y = self.baseline_y - bar_height
        return QRectF(x, y, max(1.0, self.bar_width - BAR_GAP), bar_height)

    def bar_center_x(self, index: int) -> float:
        return self.padding + index * self.bar_width + max(1.0, self.bar_width - BAR_GAP) / 2.0

    def hit_test(self, x: float, y: float) -> Optional[int]:
        if self.count == 0 or self.bar_width <= 0:
            return None
        if not (self.padding <= x <= self.width - self.padding):
            return None
        if not (self.padding <= y <= self.height - self.padding):
            return None
        index = int((x - self.padding) // self.bar_width)
        if 0 <= index < self.count:
            return index
        return None

    def price_levels(self, intervals: int = GRID_INTERVALS) -> List[Tuple[float, float]]:
        """(price, y) for evenly spaced gridlines from min to max inclusive."""
        levels = []
        for i in range(intervals + 1):
            price = self.min_price + (self.price_range / intervals) * i
            y = self.baseline_y - (i / intervals) * self.plot_height
            levels.append((price, y))
        return levels


def price_color(ratio: float) -> str:
    if ratio > HIGH_PRICE_RATIO:
        return theme.HIGH
    if ratio > MID_PRICE_RATIO:
        return theme.MID
    return theme.LOW


def time_axis_labels(samples: Sequence[PriceSample], stride: int = TIME_LABEL_STRIDE) -> List[Tuple[int, str]]:
    return [(idx, format_hour(sample)) for idx, sample in enumerate(samples) if idx % stride == 0]


def render_price_chart(
    painter: QPainter,
    samples: Sequence[PriceSample],
    now: Optional[datetime] = None,
    highlight_index: Optional[int] = None,
    size: Tuple[int, int] = PRICE_CHART_SIZE,
) -> PriceChartGeometry:
    """
    Paint the full bar chart for time-ascending ``samples``.

    The caller owns the surface; this only draws. The hover highlight is drawn
    last, on top of the base chart.
    """
    geo = PriceChartGeometry([s.price for s in samples], size)
    if geo.count == 0:
        return geo
    width, height, pad = geo.width, geo.height, geo.padding
    painter.save()
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, False)
        painter.setRenderHint(QPainter.RenderHint.TextAntialiasing, True)

        painter.setPen(pg.mkPen(QColor(theme.AXIS), width=1))
        painter.drawLine(QPointF(pad, pad), QPointF(pad, height - pad))
        painter.drawLine(QPointF(pad, height - pad), QPointF(width - pad, height - pad))

        current_index = find_current(samples, now)
        for idx in range(geo.count):
            rect = geo.bar_rect(idx)
            painter.fillRect(rect, pg.mkBrush(QColor(price_color(geo.ratio(geo.prices[idx])))))
            if idx == current_index:
                _draw_current_marker(painter, geo, idx)

        painter.setPen(pg.mkPen(QColor(theme.AXIS)))
        painter.setFont(make_font(10))
        for idx, text in time_axis_labels(samples):
            x = pad + idx * geo.bar_width + geo.bar_width / 2.0
            draw_text(painter, x, height - pad + 15, text, 'center')

        for price, y in geo.price_levels():
            painter.setPen(pg.mkPen(QColor(theme.AXIS)))
            draw_text(painter, pad - 5, y + 3, f'{price:.2f}', 'right')
            painter.setPen(dashed_pen(theme.GRID))
            painter.drawLine(QPointF(pad, y), QPointF(width - pad, y))

        painter.setPen(pg.mkPen(QColor(theme.TITLE)))
        painter.setFont(make_font(14, bold=True))
        draw_text(painter, width / 2.0, pad / 2.0, PRICE_CHART_TITLE, 'center')

        if highlight_index is not None and 0 <= highlight_index < geo.count:
            painter.setPen(pg.mkPen(QColor(theme.HIGHLIGHT), width=2))
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRect(geo.bar_rect(highlight_index))
    finally:
        painter.restore()
    return geo


def _draw_current_marker(painter: QPainter, geo: PriceChartGeometry, idx: int) -> None:
    rect = geo.bar_rect(idx)
    color = QColor(theme.CURRENT)
    painter.setPen(pg.mkPen(color, width=2))
    painter.setBrush(Qt.BrushStyle.NoBrush)
    painter.drawRect(rect)

    cx = geo.bar_center_x(idx)
    top = rect.top()
    painter.setPen(Qt.PenStyle.NoPen)
    painter.setBrush(pg.mkBrush(color))
    painter.drawPolygon(QPointF(cx, top - 2), QPointF(cx - 3, top - 8), QPointF(cx + 3, top - 8))

    painter.setPen(pg.mkPen(color))
    painter.setFont(make_font(8, bold=True))
    draw_text(painter, cx, top - 10, CURRENT_LABEL, 'center')
    painter.setBrush(Qt.BrushStyle.NoBrush)


def render_price_chart_image(
    samples: Sequence[PriceSample],
    now: Optional[datetime] = None,
    highlight_index: Optional[int] = None,
    size: Tuple[int, int] = PRICE_CHART_SIZE,
) -> QImage:
    image = new_surface(size)
    painter = QPainter(image)
    try:
        render_price_chart(painter, samples, now=now, highlight_index=highlight_index, size=size)
    finally:
        painter.end()
    return image


class PriceChartWidget(SurfaceWidget):
    series_changed = pyqtSignal()

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        now_provider: Optional[Callable[[], datetime]] = None,
    ) -> None:
        super().__init__(PRICE_CHART_SIZE, parent)
        self.setObjectName('PriceChart')
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self._now_provider = now_provider or local_now
        self._samples: List[PriceSample] = []
        self._source: Optional[Sequence[PriceSample]] = None
        self._highlight_index: Optional[int] = None
        self._geometry = PriceChartGeometry([], self.surface_size)

    @property
    def samples(self) -> List[PriceSample]:
        return list(self._samples)

    @property
    def geometry_model(self) -> PriceChartGeometry:
        return self._geometry

    @property
    def highlight_index(self) -> Optional[int]:
        return self._highlight_index

    def set_series(self, samples: Sequence[PriceSample]) -> None:
        if samples is self._source:
            return
        self._source = samples
        self._samples = sort_by_start(samples)
        self._highlight_index = None
        self.redraw()
        self.series_changed.emit()

    def set_highlight(self, index: Optional[int]) -> None:
        if index is not None and not (0 <= index < len(self._samples)):
            index = None
        self._highlight_index = index
        self.redraw()

    def sample_at(self, index: int) -> Optional[PriceSample]:
        if 0 <= index < len(self._samples):
            return self._samples[index]
        return None

    def bar_anchor(self, index: int) -> Optional[QPointF]:
        """Widget-space point at the horizontal center of the bar's top edge."""
        if not (0 <= index < self._geometry.count):
            return None
        rect = self._geometry.bar_rect(index)
        point = QPointF(self._geometry.bar_center_x(index), rect.top())
        return widget_point(point, self.display_rect(), self.surface_size)

    def _paint_surface(self, painter: QPainter) -> None:
        self._geometry = render_price_chart(
            painter,
            self._samples,
            now=self._now_provider(),
            highlight_index=self._highlight_index,
            size=self.surface_size,
        )
