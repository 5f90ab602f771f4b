from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QEvent, QObject, QPointF, Qt
from PyQt6.QtWidgets import QLabel

from core.config import UNIT
from core.models import PriceSample
from core.price_series import format_date, format_hour
from ..theme import theme
from .price_chart import PriceChartWidget
from .surface import surface_point


def tooltip_text(sample: PriceSample) -> str:
    hour = format_hour(sample) or '--:--'
    return f'{sample.price:.2f} {UNIT}\n{format_date(sample)} | {hour}'


class ChartTooltipController(QObject):
    """
    Hover handling for a ``PriceChartWidget``.

    Subscribes through an event filter on ``attach`` and unsubscribes on
    ``detach`` or when the chart is destroyed. Every pointer move that lands on
    a bar redraws the whole chart with that bar highlighted; leaving the plot
    area redraws it plain.
    """

    LABEL_OFFSET = 8

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._chart: Optional[PriceChartWidget] = None
        self._label: Optional[QLabel] = None
        self.highlight_index: Optional[int] = None
        self.last_pointer: Optional[QPointF] = None

    @property
    def chart(self) -> Optional[PriceChartWidget]:
        return self._chart

    @property
    def label(self) -> Optional[QLabel]:
        return self._label

    def attach(self, chart: PriceChartWidget) -> None:
        if chart is self._chart:
            return
        self.detach()
        self._chart = chart
        chart.setMouseTracking(True)
        chart.installEventFilter(self)
        chart.series_changed.connect(self.reset)
        chart.destroyed.connect(self._on_chart_destroyed)

        label = QLabel(chart)
        label.setObjectName('PriceChartTooltip')
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        label.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        label.setStyleSheet(
            f'background-color: {theme.TOOLTIP_BG}; color: #FFFFFF; '
            f'border: 1px solid {theme.TOOLTIP_BORDER}; border-radius: 6px; padding: 6px 10px;'
        )
        label.hide()
        self._label = label

    def detach(self) -> None:
        chart = self._chart
        if chart is None:
            return
        try:
            chart.removeEventFilter(self)
            chart.series_changed.disconnect(self.reset)
            chart.destroyed.disconnect(self._on_chart_destroyed)
        except (RuntimeError, TypeError):
            pass
        if self._label is not None:
            self._label.hide()
            self._label.deleteLater()
        self._chart = None
        self._label = None
        self.highlight_index = None
        self.last_pointer = None

    def _on_chart_destroyed(self, *_args) -> None:
        # Qt already tore down the widget and its label.
        self._chart = None
        self._label = None
        self.highlight_index = None
        self.last_pointer = None

    def eventFilter(self, obj, event) -> bool:
        if obj is self._chart and event is not None:
            etype = event.type()
            if etype == QEvent.Type.MouseMove:
                self.pointer_moved(event.position())
            elif etype == QEvent.Type.Leave:
                self.pointer_left()
        return False

    def reset(self) -> None:
        """Drop hover state without touching the chart (it just redrew itself)."""
        self.highlight_index = None
        self.last_pointer = None
        if self._label is not None:
            self._label.hide()

    def pointer_moved(self, pos: QPointF) -> None:
        chart = self._chart
        if chart is None:
            return
        self.last_pointer = QPointF(pos)
        point = surface_point(pos, chart.display_rect(), chart.surface_size)
        index = chart.geometry_model.hit_test(point.x(), point.y()) if point is not None else None
        sample = chart.sample_at(index) if index is not None else None
        if index is None or sample is None:
            self._clear_highlight()
            return
        self.highlight_index = index
        chart.set_highlight(index)
        self._show_label(index, sample)

    def pointer_left(self) -> None:
        self.last_pointer = None
        self._clear_highlight()

    def _clear_highlight(self) -> None:
        self.highlight_index = None
        if self._label is not None:
            self._label.hide()
        if self._chart is not None:
            self._chart.set_highlight(None)

    def _show_label(self, index: int, sample: PriceSample) -> None:
        chart = self._chart
        label = self._label
        if chart is None or label is None:
            return
        anchor = chart.bar_anchor(index)
        if anchor is None:
            label.hide()
            return
        label.setText(tooltip_text(sample))
        label.adjustSize()
        x = anchor.x() - label.width() / 2.0
        y = anchor.y() - label.height() - self.LABEL_OFFSET
        x = min(max(0.0, x), max(0.0, chart.width() - label.width()))
        y = max(0.0, y)
        label.move(int(round(x)), int(round(y)))
        label.show()
        label.raise_()
