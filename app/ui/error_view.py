from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QFrame, QLabel, QPushButton, QVBoxLayout, QWidget

from .theme import theme

FALLBACK_MESSAGE = 'Unknown error occurred'


class ErrorView(QWidget):
    """Full-page error state with a manual retry button."""

    retry_requested = pyqtSignal()

    def __init__(self) -> None:
        super().__init__()
        self.setObjectName('ErrorView')
        outer = QVBoxLayout(self)
        outer.addStretch(1)

        box = QFrame()
        box.setObjectName('ErrorBox')
        box.setMaximumWidth(460)
        box.setStyleSheet(
            f'#ErrorBox {{ background: {theme.PANEL}; border: 1px solid {theme.UP}; border-radius: 8px; }}'
        )
        layout = QVBoxLayout(box)
        layout.setContentsMargins(24, 20, 24, 20)
        layout.setSpacing(10)

        title = QLabel('Loading price data failed')
        title.setStyleSheet(f'color: {theme.UP}; font-size: 18px; font-weight: bold;')
        layout.addWidget(title)

        self.message_label = QLabel('')
        self.message_label.setObjectName('ErrorMessage')
        self.message_label.setWordWrap(True)
        self.message_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        self.message_label.setStyleSheet(f'color: {theme.TITLE};')
        layout.addWidget(self.message_label)

        hint = QLabel('Please try again later. If the problem persists, the price service may be down.')
        hint.setWordWrap(True)
        hint.setStyleSheet(f'color: {theme.MUTED}; font-size: 11px;')
        layout.addWidget(hint)

        self.retry_button = QPushButton('Try again')
        self.retry_button.setObjectName('RetryButton')
        self.retry_button.clicked.connect(self.retry_requested.emit)
        layout.addWidget(self.retry_button, 0, Qt.AlignmentFlag.AlignLeft)

        outer.addWidget(box, 0, Qt.AlignmentFlag.AlignHCenter)
        outer.addStretch(2)

    @property
    def message(self) -> str:
        return self.message_label.text()

    def set_message(self, message: str) -> None:
        self.message_label.setText(message.strip() if message and message.strip() else FALLBACK_MESSAGE)
