import os
from datetime import datetime
from typing import Callable, List, Optional

from PyQt6.QtCore import QSettings, Qt, QThread, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QFileDialog, QLabel, QMainWindow, QStackedWidget, QVBoxLayout, QWidget

from core.config import REFRESH_SECONDS, UNIT
from core.errors import PriceDataError
from core.logger import log
from core.models import PriceSample
from core.price_fetch import load_price_series
from core.price_series import local_now
from .dashboard_view import DashboardView
from .error_view import ErrorView
from .theme import theme


class PriceFetchWorker(QThread):
    data_ready = pyqtSignal(list)
    error = pyqtSignal(str)

    def __init__(self, fetcher: Callable[[], List[PriceSample]]) -> None:
        super().__init__()
        self._fetcher = fetcher

    def run(self) -> None:
        try:
            samples = self._fetcher()
            self.data_ready.emit(list(samples))
        except Exception as exc:
            self.error.emit(str(exc))


class MainWindow(QMainWindow):
    def __init__(
        self,
        fetcher: Callable[[], List[PriceSample]] = load_price_series,
        now_provider: Optional[Callable[[], datetime]] = None,
        auto_load: bool = True,
    ) -> None:
        super().__init__()
        self.setWindowTitle('Hourly Electricity Prices')
        self.resize(1100, 900)
        self._fetcher = fetcher
        self._now_provider = now_provider or local_now
        self._worker: Optional[PriceFetchWorker] = None

        header = QWidget()
        header.setObjectName('Header')
        header_layout = QVBoxLayout(header)
        header_layout.setContentsMargins(16, 12, 16, 4)
        title = QLabel('Hourly Electricity Prices')
        title.setStyleSheet(f'color: {theme.TITLE}; font-size: 22px; font-weight: bold;')
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        subtitle = QLabel(f'Current hourly spot prices ({UNIT})')
        subtitle.setStyleSheet(f'color: {theme.MUTED};')
        subtitle.setAlignment(Qt.AlignmentFlag.AlignCenter)
        header_layout.addWidget(title)
        header_layout.addWidget(subtitle)

        self.loading_label = QLabel('Loading prices...')
        self.loading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.loading_label.setStyleSheet(f'color: {theme.TEXT};')
        self.error_view = ErrorView()
        self.error_view.retry_requested.connect(self.reload)
        self.dashboard = DashboardView(now_provider=self._now_provider)

        self.pages = QStackedWidget()
        self.pages.addWidget(self.loading_label)
        self.pages.addWidget(self.error_view)
        self.pages.addWidget(self.dashboard)

        central = QWidget()
        central.setStyleSheet(f'background: {theme.BACKGROUND};')
        central_layout = QVBoxLayout(central)
        central_layout.setContentsMargins(0, 0, 0, 0)
        central_layout.setSpacing(0)
        central_layout.addWidget(header)
        central_layout.addWidget(self.pages, 1)
        self.setCentralWidget(central)

        self._refresh_timer = QTimer(self)
        self._refresh_timer.setSingleShot(True)
        self._refresh_timer.timeout.connect(self.reload)

        self._settings = QSettings('SpotPrices', 'SpotPrices')
        self._setup_menu()
        self._restore_layout()
        if auto_load:
            self.reload()

    def _setup_menu(self) -> None:
        file_menu = self.menuBar().addMenu('File')

        reload_action = QAction('Reload', self)
        reload_action.setShortcut(QKeySequence.StandardKey.Refresh)
        reload_action.triggered.connect(self.reload)
        file_menu.addAction(reload_action)

        export_chart = QAction('Export Price Chart as PNG...', self)
        export_chart.triggered.connect(lambda: self._export_png(self.dashboard.price_chart, 'price_chart.png'))
        file_menu.addAction(export_chart)

        export_hist = QAction('Export Histogram as PNG...', self)
        export_hist.triggered.connect(lambda: self._export_png(self.dashboard.histogram, 'price_histogram.png'))
        file_menu.addAction(export_hist)

        file_menu.addSeparator()
        quit_action = QAction('Quit', self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    @property
    def is_loading(self) -> bool:
        return self._worker is not None and self._worker.isRunning()

    def reload(self) -> None:
        if self.is_loading:
            return
        log.info('Reloading price data')
        self.pages.setCurrentWidget(self.loading_label)
        self._worker = PriceFetchWorker(self._fetcher)
        self._worker.data_ready.connect(self.present)
        self._worker.error.connect(self.show_error)
        self._worker.start()

    def present(self, samples: List[PriceSample]) -> None:
        try:
            self.dashboard.present(samples)
        except PriceDataError as exc:
            self.show_error(str(exc))
            return
        except Exception as exc:
            log.exception('Dashboard render failed')
            self.show_error(f'Chart render failed: {exc}')
            return
        self.pages.setCurrentWidget(self.dashboard)
        self._schedule_refresh()

    def show_error(self, message: str) -> None:
        log.error('Price data unavailable: %s', message)
        self.error_view.set_message(message)
        self.pages.setCurrentWidget(self.error_view)

    def _schedule_refresh(self) -> None:
        # Fire on the next boundary so the current-hour marker moves with the clock.
        now = self._now_provider()
        elapsed = now.minute * 60 + now.second
        delay = REFRESH_SECONDS - (elapsed % REFRESH_SECONDS)
        self._refresh_timer.start(int(delay * 1000) + 500)

    def _export_png(self, chart, default_name: str) -> None:
        default_path = os.path.join(os.path.expanduser('~'), default_name)
        path, _ = QFileDialog.getSaveFileName(self, 'Export as PNG', default_path, 'PNG Image (*.png)')
        if not path:
            return
        if not path.lower().endswith('.png'):
            path = f'{path}.png'
        if not chart.export_png(path):
            log.error('Could not write %s', path)

    def shutdown(self) -> None:
        self._refresh_timer.stop()
        if self._worker is not None and self._worker.isRunning():
            self._worker.quit()
            self._worker.wait(1500)
        self.dashboard.shutdown()

    def closeEvent(self, event) -> None:
        self._save_layout()
        self.shutdown()
        super().closeEvent(event)

    def _save_layout(self) -> None:
        self._settings.setValue('geometry', self.saveGeometry())

    def _restore_layout(self) -> None:
        geometry = self._settings.value('geometry')
        if geometry is not None:
            self.restoreGeometry(geometry)
