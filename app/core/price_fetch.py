"""
HTTP access to the hourly spot price API.

One GET per load. Transport failures and bad statuses become
``PriceFetchError``; a body without a usable ``prices`` list becomes
``EmptyPriceDataError``. Nothing is retried.
"""

from __future__ import annotations

from typing import Any, List

import requests

from core.config import API_URL, REQUEST_TIMEOUT
from core.errors import EmptyPriceDataError, PriceFetchError
from core.logger import log
from core.models import PriceSample
from core.price_series import parse_samples


def api_get(url: str = API_URL, timeout: float = REQUEST_TIMEOUT) -> Any:
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise PriceFetchError(f"Failed to fetch electricity prices: {exc}") from exc
    if not resp.ok:
        raise PriceFetchError(f"Failed to fetch electricity prices: {resp.status_code}")
    try:
        return resp.json()
    except ValueError as exc:
        raise EmptyPriceDataError() from exc


def extract_prices(payload: Any) -> List[Any]:
    if not isinstance(payload, dict):
        raise EmptyPriceDataError()
    prices = payload.get("prices")
    if not isinstance(prices, list) or not prices:
        raise EmptyPriceDataError()
    return prices


def load_price_series(url: str = API_URL, timeout: float = REQUEST_TIMEOUT) -> List[PriceSample]:
    """Fetch and parse the latest prices; raises on any fatal condition."""
    log.info("Fetching prices from %s", url)
    raw = extract_prices(api_get(url, timeout))
    samples = parse_samples(raw)
    skipped = sum(1 for s in samples if s.start is None or s.end is None)
    if skipped:
        log.warning("%d of %d samples have unparseable dates", skipped, len(samples))
    log.info("Loaded %d price samples", len(samples))
    return samples
