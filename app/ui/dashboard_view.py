from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional, Sequence

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QFrame,
    QGridLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from core.config import BEST_HOURS_COUNT, SOURCE_NAME, UNIT
from core.models import DerivedStats, PriceSample
from core.price_series import cheapest_hours, format_day_time, local_now
from core.price_stats import compute_stats
from .charts.chart_tooltip import ChartTooltipController
from .charts.price_chart import PriceChartWidget
from .charts.price_histogram import PriceHistogramWidget
from .price_table import PriceTable
from .stats_cards import StatsRow
from .theme import theme


def _section_title(text: str) -> QLabel:
    label = QLabel(text)
    label.setStyleSheet(f'color: {theme.TITLE}; font-size: 15px; font-weight: bold;')
    return label


def _panel() -> QFrame:
    frame = QFrame()
    frame.setObjectName('Panel')
    frame.setStyleSheet(f'#Panel {{ background: {theme.PANEL}; border: 1px solid {theme.BORDER}; border-radius: 6px; }}')
    return frame


def guidance_text(stats: DerivedStats) -> Optional[str]:
    if stats.current is None:
        return None
    if stats.is_good_time:
        return 'Good time to use electricity! The price is below average.'
    return 'The price is above average. Consider waiting if you can.'


class DashboardView(QWidget):
    """All dashboard content for one loaded series."""

    def __init__(self, now_provider: Optional[Callable[[], datetime]] = None) -> None:
        super().__init__()
        self.setObjectName('DashboardView')
        self._now_provider = now_provider or local_now
        self.stats: Optional[DerivedStats] = None

        content = QWidget()
        layout = QVBoxLayout(content)
        layout.setContentsMargins(16, 12, 16, 12)
        layout.setSpacing(14)

        self.stats_row = StatsRow()
        layout.addWidget(self.stats_row)

        layout.addWidget(_section_title('Price trend'))
        chart_panel = _panel()
        chart_layout = QVBoxLayout(chart_panel)
        self.price_chart = PriceChartWidget(now_provider=self._now_provider)
        chart_layout.addWidget(self.price_chart)
        self.guidance_label = QLabel('')
        self.guidance_label.setObjectName('Guidance')
        self.guidance_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.guidance_label.setWordWrap(True)
        chart_layout.addWidget(self.guidance_label)
        layout.addWidget(chart_panel)

        self.tooltip = ChartTooltipController(self)
        self.tooltip.attach(self.price_chart)

        grid = QGridLayout()
        grid.setHorizontalSpacing(16)
        grid.addWidget(_section_title('Price distribution'), 0, 0)
        grid.addWidget(_section_title('Best times to use electricity'), 0, 1)
        hist_panel = _panel()
        hist_layout = QVBoxLayout(hist_panel)
        self.histogram = PriceHistogramWidget()
        hist_layout.addWidget(self.histogram)
        grid.addWidget(hist_panel, 1, 0)
        best_panel = _panel()
        best_layout = QVBoxLayout(best_panel)
        self.best_times = QListWidget()
        self.best_times.setObjectName('BestTimes')
        self.best_times.setSelectionMode(QListWidget.SelectionMode.NoSelection)
        best_layout.addWidget(self.best_times)
        grid.addWidget(best_panel, 1, 1)
        grid.setColumnStretch(0, 1)
        grid.setColumnStretch(1, 1)
        layout.addLayout(grid)

        layout.addWidget(_section_title('All hourly prices'))
        self.table = PriceTable()
        layout.addWidget(self.table)

        self.footer_label = QLabel('')
        self.footer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.footer_label.setStyleSheet(f'color: {theme.MUTED}; font-size: 11px;')
        layout.addWidget(self.footer_label)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.Shape.NoFrame)
        scroll.setWidget(content)
        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.addWidget(scroll)

    def present(self, samples: Sequence[PriceSample]) -> DerivedStats:
        """Render every section from ``samples``; raises on an empty series."""
        now = self._now_provider()
        stats = compute_stats(samples, now)
        self.stats = stats
        self.stats_row.set_stats(stats)
        self.price_chart.set_series(samples)
        self.histogram.set_series(samples)
        self._set_best_times(cheapest_hours(samples, BEST_HOURS_COUNT))
        self._set_guidance(stats)
        self.table.set_prices(samples, stats.mean)
        self.footer_label.setText(
            f'Data from the {SOURCE_NAME} API\nLast updated: {now.strftime("%d.%m.%Y %H:%M:%S")}'
        )
        return stats

    def best_time_texts(self) -> List[str]:
        return [self.best_times.item(i).text() for i in range(self.best_times.count())]

    def _set_best_times(self, samples: Sequence[PriceSample]) -> None:
        self.best_times.clear()
        for sample in samples:
            item = QListWidgetItem(f'{format_day_time(sample)}    {sample.price:.2f} {UNIT}')
            item.setForeground(QColor(theme.DOWN))
            self.best_times.addItem(item)

    def _set_guidance(self, stats: DerivedStats) -> None:
        text = guidance_text(stats)
        if text is None:
            self.guidance_label.hide()
            return
        color = theme.DOWN if stats.is_good_time else theme.MID
        self.guidance_label.setText(f'Current price: {stats.current.price:.2f} {UNIT}\n{text}')
        self.guidance_label.setStyleSheet(f'color: {color}; padding: 8px;')
        self.guidance_label.show()

    def shutdown(self) -> None:
        self.tooltip.detach()
