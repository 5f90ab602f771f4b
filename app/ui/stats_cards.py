from __future__ import annotations

from typing import Optional

from PyQt6.QtWidgets import QFrame, QHBoxLayout, QLabel, QVBoxLayout, QWidget

from core.config import UNIT
from core.models import DerivedStats
from .theme import theme


class StatsCard(QFrame):
    def __init__(self, title: str) -> None:
        super().__init__()
        self.setObjectName('StatsCard')
        self.setStyleSheet(
            f'#StatsCard {{ background: {theme.PANEL}; border: 1px solid {theme.BORDER}; border-radius: 6px; }}'
        )
        layout = QVBoxLayout(self)
        layout.setContentsMargins(14, 10, 14, 10)
        layout.setSpacing(4)

        self.title_label = QLabel(title)
        self.title_label.setStyleSheet(f'color: {theme.MUTED}; font-size: 11px;')
        self.value_label = QLabel('-')
        self.value_label.setStyleSheet(f'color: {theme.TITLE}; font-size: 20px; font-weight: bold;')
        self.change_label = QLabel('')
        self.change_label.hide()
        layout.addWidget(self.title_label)
        layout.addWidget(self.value_label)
        layout.addWidget(self.change_label)

    def set_value(self, text: str) -> None:
        self.value_label.setText(text)

    def set_change(self, text: Optional[str], is_positive: bool = True) -> None:
        if not text:
            self.change_label.hide()
            return
        # "Positive" means cheaper than average: good news, down arrow.
        arrow = '↓' if is_positive else '↑'
        color = theme.DOWN if is_positive else theme.UP
        self.change_label.setText(f'{arrow} {text}')
        self.change_label.setStyleSheet(f'color: {color};')
        self.change_label.show()


class StatsRow(QWidget):
    def __init__(self) -> None:
        super().__init__()
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)
        self.current_card = StatsCard('Current price')
        self.average_card = StatsCard('Average price')
        self.min_card = StatsCard('Minimum price')
        self.max_card = StatsCard('Maximum price')
        for card in (self.current_card, self.average_card, self.min_card, self.max_card):
            layout.addWidget(card, 1)

    def set_stats(self, stats: DerivedStats) -> None:
        if stats.current is not None:
            self.current_card.set_value(f'{stats.current.price:.2f} {UNIT}')
            self.current_card.set_change(
                f'{abs(stats.pct_deviation):.1f}% from average',
                is_positive=stats.pct_deviation <= 0,
            )
        else:
            self.current_card.set_value('n/a')
            self.current_card.set_change(None)
        self.average_card.set_value(f'{stats.mean:.2f} {UNIT}')
        self.min_card.set_value(f'{stats.minimum:.2f} {UNIT}')
        self.max_card.set_value(f'{stats.maximum:.2f} {UNIT}')
