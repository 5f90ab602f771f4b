from __future__ import annotations

import math
from typing import Sequence

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import QHeaderView, QSizePolicy, QTableWidget, QTableWidgetItem

from core.models import PriceSample
from core.price_series import format_day_time, sort_by_start
from .theme import theme


class SortKeyItem(QTableWidgetItem):
    """Table item that sorts by a stored key instead of its display text."""

    def __init__(self, text: str, key) -> None:
        super().__init__(text)
        self.setData(Qt.ItemDataRole.UserRole, key)
        self.setFlags(self.flags() & ~Qt.ItemFlag.ItemIsEditable)

    def __lt__(self, other) -> bool:
        mine = self.data(Qt.ItemDataRole.UserRole)
        theirs = other.data(Qt.ItemDataRole.UserRole) if isinstance(other, QTableWidgetItem) else None
        try:
            return mine < theirs
        except TypeError:
            return super().__lt__(other)


class PriceTable(QTableWidget):
    COLUMNS = ['Time', 'Price (c/kWh)', 'Status']

    def __init__(self) -> None:
        super().__init__(0, len(self.COLUMNS))
        self.setObjectName('PriceTable')
        self.setHorizontalHeaderLabels(self.COLUMNS)
        self.setSortingEnabled(True)
        self.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
        self.setMinimumHeight(240)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.verticalHeader().setVisible(False)
        self.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)

    def set_prices(self, samples: Sequence[PriceSample], mean: float) -> None:
        # Sorting while inserting would scatter the cells of a row.
        self.setSortingEnabled(False)
        try:
            self.setRowCount(0)
            for sample in sort_by_start(samples):
                row = self.rowCount()
                self.insertRow(row)
                ts_key = sample.start.timestamp() if sample.start is not None else math.inf
                self.setItem(row, 0, SortKeyItem(format_day_time(sample), ts_key))
                self.setItem(row, 1, SortKeyItem(f'{sample.price:.2f}', sample.price))
                cheap = sample.price < mean
                status = SortKeyItem('Cheap' if cheap else 'Expensive', 0 if cheap else 1)
                status.setForeground(QColor(theme.DOWN if cheap else theme.UP))
                self.setItem(row, 2, status)
        finally:
            self.setSortingEnabled(True)
        self.sortItems(0, Qt.SortOrder.AscendingOrder)

    def column_texts(self, column: int) -> list[str]:
        texts = []
        for row in range(self.rowCount()):
            item = self.item(row, column)
            texts.append(item.text() if item is not None else '')
        return texts
