import math
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

from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import QApplication

from core.price_series import parse_samples
from ui.charts.price_chart import (
    PriceChartGeometry,
    PriceChartWidget,
    price_color,
    render_price_chart_image,
    time_axis_labels,
)
from ui.theme import theme

FAR_PAST = datetime(2000, 1, 1)


def _hours(prices, day=1):
    raw = []
    for h, price in enumerate(prices):
        raw.append({
            "price": price,
            "startDate": f"2024-01-{day:02d}T{h:02d}:00",
            "endDate": f"2024-01-{day:02d}T{h:02d}:59:59",
        })
    return parse_samples(raw)


def _color(image, x, y):
    return image.pixelColor(x, y).name()


class GeometryTests(unittest.TestCase):
    def test_flat_series_uses_uniform_mid_bars(self):
        geo = PriceChartGeometry([4.0] * 6)
        heights = {round(geo.bar_rect(i).height(), 6) for i in range(6)}
        self.assertEqual(len(heights), 1)
        self.assertGreater(heights.pop(), 0.0)
        self.assertEqual(price_color(geo.ratio(4.0)), theme.MID)

    def test_bar_extremes(self):
        geo = PriceChartGeometry([2.0, 6.0, 10.0])
        self.assertEqual(geo.bar_rect(0).height(), 0.0)
        self.assertEqual(geo.bar_rect(2).height(), geo.plot_height)
        self.assertEqual(geo.bar_rect(2).top(), geo.padding)

    def test_color_bands(self):
        self.assertEqual(price_color(0.0), theme.LOW)
        self.assertEqual(price_color(0.4), theme.LOW)
        self.assertEqual(price_color(0.41), theme.MID)
        self.assertEqual(price_color(0.7), theme.MID)
        self.assertEqual(price_color(0.71), theme.HIGH)

    def test_hit_test(self):
        geo = PriceChartGeometry([1.0] * 10)
        self.assertEqual(geo.bar_width, 72.0)
        self.assertEqual(geo.hit_test(40.0, 200.0), 0)
        self.assertEqual(geo.hit_test(40.0 + 72.0 * 2 + 1, 200.0), 2)
        self.assertEqual(geo.hit_test(759.0, 360.0), 9)
        self.assertIsNone(geo.hit_test(39.0, 200.0))
        self.assertIsNone(geo.hit_test(100.0, 20.0))
        self.assertIsNone(geo.hit_test(100.0, 370.0))
        self.assertIsNone(PriceChartGeometry([]).hit_test(100.0, 100.0))

    def test_price_levels(self):
        levels = PriceChartGeometry([0.0, 10.0]).price_levels()
        self.assertEqual(len(levels), 6)
        self.assertEqual(levels[0], (0.0, 360.0))
        self.assertEqual(levels[-1], (10.0, 40.0))

    def test_time_label_count(self):
        for n in (1, 3, 4, 5, 24, 25, 48):
            samples = _hours([1.0] * min(n, 24))
            while len(samples) < n:
                samples = samples + _hours([1.0] * min(n - len(samples), 24), day=2)
            self.assertEqual(len(time_axis_labels(samples)), math.ceil(n / 4), n)
        labels = time_axis_labels(_hours([1.0] * 8))
        self.assertEqual(labels, [(0, "00:00"), (4, "04:00")])


class RenderTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self):
        self.samples = _hours([1.0, 5.0, 10.0, 2.0])

    def test_bar_colors(self):
        image = render_price_chart_image(self.samples, now=FAR_PAST)
        self.assertEqual((image.width(), image.height()), (800, 400))
        self.assertEqual(_color(image, 489, 200), QColor(theme.HIGH).name())
        self.assertEqual(_color(image, 309, 330), QColor(theme.MID).name())
        self.assertEqual(_color(image, 669, 345), QColor(theme.LOW).name())
        # Lowest price has a zero-height bar.
        self.assertEqual(_color(image, 129, 330), QColor(theme.SURFACE).name())

    def _edge_colors(self, image, x0, x1, y):
        return {_color(image, x, y) for x in range(x0, x1)}

    def test_highlight_outline(self):
        white = QColor(theme.HIGHLIGHT).name()
        plain = render_price_chart_image(self.samples, now=FAR_PAST)
        lit = render_price_chart_image(self.samples, now=FAR_PAST, highlight_index=2)
        self.assertNotIn(white, self._edge_colors(plain, 397, 404, 200))
        self.assertIn(white, self._edge_colors(lit, 397, 404, 200))

    def test_current_marker(self):
        now = self.samples[2].start.replace(minute=30)
        image = render_price_chart_image(self.samples, now=now)
        marker = QColor(theme.CURRENT).name()
        self.assertIn(marker, self._edge_colors(image, 397, 404, 200))
        self.assertEqual(_color(image, 489, 35), marker)

    def test_empty_series_leaves_blank_surface(self):
        image = render_price_chart_image([])
        self.assertEqual(_color(image, 400, 200), QColor(theme.SURFACE).name())


class WidgetTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def test_set_series_sorts_copy_and_resets_highlight(self):
        widget = PriceChartWidget(now_provider=lambda: FAR_PAST.astimezone())
        samples = list(reversed(_hours([3.0, 1.0, 2.0])))
        original = list(samples)
        emitted = []
        widget.series_changed.connect(lambda: emitted.append(True))
        widget.set_series(samples)
        widget.set_highlight(1)
        self.assertEqual(widget.highlight_index, 1)

        self.assertEqual([s.price for s in widget.samples], [3.0, 1.0, 2.0])
        self.assertEqual(samples, original)
        widget.set_series(samples)
        self.assertEqual(len(emitted), 1)
        self.assertEqual(widget.highlight_index, 1)

        widget.set_series(list(samples))
        self.assertEqual(len(emitted), 2)
        self.assertIsNone(widget.highlight_index)

    def test_out_of_range_highlight_is_ignored(self):
        widget = PriceChartWidget(now_provider=lambda: FAR_PAST.astimezone())
        widget.set_series(_hours([1.0, 2.0]))
        widget.set_highlight(5)
        self.assertIsNone(widget.highlight_index)


if __name__ == "__main__":
    unittest.main()
