"""
Centralised configuration for the spot price dashboard.

All tunables live here so charts, fetch code and widgets never hard-code
magic numbers.
"""

# ── API ──────────────────────────────────────────────────────────────────────
API_URL: str = "https://api.porssisahko.net/v1/latest-prices.json"
REQUEST_TIMEOUT: float = 30.0
SOURCE_NAME: str = "porssisahko.net"

# ── Refresh ──────────────────────────────────────────────────────────────────
REFRESH_SECONDS: int = 3600

# ── Units ────────────────────────────────────────────────────────────────────
UNIT: str = "c/kWh"

# ── Price chart surface ──────────────────────────────────────────────────────
PRICE_CHART_SIZE: tuple = (800, 400)
PRICE_CHART_TITLE: str = "Electricity Prices (c/kWh)"
CHART_PADDING: int = 40
BAR_GAP: float = 2.0
TIME_LABEL_STRIDE: int = 4
GRID_INTERVALS: int = 5
HIGH_PRICE_RATIO: float = 0.7
MID_PRICE_RATIO: float = 0.4
FLAT_RANGE_RATIO: float = 0.5  # bar height ratio when every price is equal
CURRENT_LABEL: str = "NOW"

# ── Histogram surface ────────────────────────────────────────────────────────
HISTOGRAM_SIZE: tuple = (500, 300)
HISTOGRAM_TITLE: str = "Price Distribution (c/kWh)"
HISTOGRAM_BINS: int = 10

# ── Dashboard ────────────────────────────────────────────────────────────────
BEST_HOURS_COUNT: int = 5
