from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import pyqtgraph as pg
from PyQt6.QtCore import QPointF, QRectF
from PyQt6.QtGui import QColor, QImage, QPainter
from PyQt6.QtWidgets import QWidget

from core.config import (
    BAR_GAP,
    CHART_PADDING,
    GRID_INTERVALS,
    HISTOGRAM_BINS,
    HISTOGRAM_SIZE,
    HISTOGRAM_TITLE,
)
from core.models import PriceSample
from ..theme import theme
from .surface import SurfaceWidget, dashed_pen, draw_text, make_font, new_surface


@dataclass
class HistogramBins:
    counts: np.ndarray
    minimum: float
    maximum: float
    bin_size: float

    @property
    def bin_count(self) -> int:
        return int(self.counts.size)

    @property
    def max_count(self) -> int:
        return int(self.counts.max()) if self.counts.size else 0

    def lower_bound(self, index: int) -> float:
        return self.minimum + index * self.bin_size


def compute_histogram(prices: Union[Sequence[float], np.ndarray], bin_count: int = HISTOGRAM_BINS) -> HistogramBins:
    bin_count = max(1, int(bin_count))
    values = np.asarray(prices, dtype=np.float64)
    counts = np.zeros(bin_count, dtype=np.int64)
    if values.size == 0:
        return HistogramBins(counts, 0.0, 0.0, 0.0)
    minimum = float(values.min())
    maximum = float(values.max())
    bin_size = (maximum - minimum) / bin_count
    if bin_size <= 0:
        counts[0] = values.size
        return HistogramBins(counts, minimum, maximum, 0.0)
    idx = np.floor((values - minimum) / bin_size).astype(np.int64)
    # max lands exactly on bin_count; fold it into the last bin.
    idx = np.clip(idx, 0, bin_count - 1)
    counts += np.bincount(idx, minlength=bin_count)[:bin_count]
    return HistogramBins(counts, minimum, maximum, bin_size)


def bin_color(index: int, bin_count: int) -> QColor:
    ratio = index / (bin_count - 1) if bin_count > 1 else 0.0
    cheap = theme.CHEAP_RGB
    dear = theme.EXPENSIVE_RGB
    return QColor(*(int(round(c + (d - c) * ratio)) for c, d in zip(cheap, dear)))


def render_histogram(
    painter: QPainter,
    prices: Sequence[float],
    size: Tuple[int, int] = HISTOGRAM_SIZE,
    bin_count: int = HISTOGRAM_BINS,
) -> HistogramBins:
    bins = compute_histogram(prices, bin_count)
    max_count = bins.max_count
    if max_count <= 0:
        return bins
    width, height = float(size[0]), float(size[1])
    pad = float(CHART_PADDING)
    plot_width = width - pad * 2
    plot_height = height - pad * 2
    bar_width = plot_width / bins.bin_count

    painter.save()
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, False)

        painter.setPen(pg.mkPen(QColor(theme.AXIS), width=1))
        painter.drawLine(QPointF(pad, pad), QPointF(pad, height - pad))
        painter.drawLine(QPointF(pad, height - pad), QPointF(width - pad, height - pad))

        painter.setFont(make_font(10))
        for idx, count in enumerate(bins.counts.tolist()):
            x = pad + idx * bar_width
            bar_height = (count / max_count) * plot_height
            y = height - pad - bar_height
            painter.fillRect(QRectF(x, y, max(1.0, bar_width - BAR_GAP), bar_height), pg.mkBrush(bin_color(idx, bins.bin_count)))
            if idx % 2 == 0 or idx == bins.bin_count - 1:
                painter.setPen(pg.mkPen(QColor(theme.AXIS)))
                draw_text(painter, x + bar_width / 2.0, height - pad + 15, f'{bins.lower_bound(idx):.1f}', 'center')

        for i in range(GRID_INTERVALS + 1):
            count = (max_count / GRID_INTERVALS) * i
            y = height - pad - (i / GRID_INTERVALS) * plot_height
            painter.setPen(pg.mkPen(QColor(theme.AXIS)))
            draw_text(painter, pad - 5, y + 3, str(int(round(count))), 'right')
            painter.setPen(dashed_pen(theme.GRID))
            painter.drawLine(QPointF(pad, y), QPointF(width - pad, y))

        painter.setPen(pg.mkPen(QColor(theme.TITLE)))
        painter.setFont(make_font(14, bold=True))
        draw_text(painter, width / 2.0, pad / 2.0, HISTOGRAM_TITLE, 'center')
    finally:
        painter.restore()
    return bins


def render_histogram_image(prices: Sequence[float], size: Tuple[int, int] = HISTOGRAM_SIZE) -> QImage:
    image = new_surface(size)
    painter = QPainter(image)
    try:
        render_histogram(painter, prices, size)
    finally:
        painter.end()
    return image


class PriceHistogramWidget(SurfaceWidget):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(HISTOGRAM_SIZE, parent)
        self.setObjectName('PriceHistogram')
        self._prices: List[float] = []
        self.bins: Optional[HistogramBins] = None

    def set_series(self, samples: Sequence[PriceSample]) -> None:
        self._prices = [s.price for s in samples]
        self.redraw()

    def _paint_surface(self, painter: QPainter) -> None:
        self.bins = render_histogram(painter, self._prices, self.surface_size)
