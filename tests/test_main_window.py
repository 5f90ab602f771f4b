import os
import sys
import unittest
from datetime import datetime

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Allow `import core.*` like the app does when running `python app/main.py`.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
APP_DIR = os.path.join(REPO_ROOT, "app")
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

from PyQt6.QtWidgets import QApplication

from core.price_series import parse_samples
from ui.error_view import FALLBACK_MESSAGE
from ui.main_window import MainWindow

NOW = datetime(2024, 1, 1, 1, 30).astimezone()


def _samples():
    prices = [8.0, 15.0, 5.0, 3.0, 12.0, 7.0, 9.0]
    return parse_samples([
        {"price": p, "startDate": f"2024-01-01T{h:02d}:00", "endDate": f"2024-01-01T{h + 1:02d}:00"}
        for h, p in enumerate(prices)
    ])


class MainWindowSmokeTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self):
        self.window = MainWindow(now_provider=lambda: NOW, auto_load=False)

    def tearDown(self):
        self.window.shutdown()
        self.window.deleteLater()

    def test_empty_series_shows_error_page(self):
        self.window.present([])
        self.assertIs(self.window.pages.currentWidget(), self.window.error_view)
        self.assertEqual(self.window.error_view.message, "No price data available")

    def test_blank_error_uses_fallback(self):
        self.window.show_error("")
        self.assertEqual(self.window.error_view.message, FALLBACK_MESSAGE)

    def test_fetch_error_message_is_shown(self):
        self.window.show_error("Failed to fetch electricity prices: 500")
        self.assertIs(self.window.pages.currentWidget(), self.window.error_view)
        self.assertIn("500", self.window.error_view.message)

    def test_series_populates_dashboard(self):
        self.window.present(_samples())
        dash = self.window.dashboard
        self.assertIs(self.window.pages.currentWidget(), dash)
        self.assertEqual(dash.stats.current_price, 15.0)
        self.assertEqual(dash.table.rowCount(), 7)
        self.assertEqual(dash.table.column_texts(1)[:2], ["8.00", "15.00"])
        best = dash.best_time_texts()
        self.assertEqual(len(best), 5)
        self.assertTrue(best[0].startswith("01.01. 03:00"))
        self.assertEqual(dash.stats_row.current_card.value_label.text(), "15.00 c/kWh")
        self.assertTrue(self.window._refresh_timer.isActive())


if __name__ == "__main__":
    unittest.main()
