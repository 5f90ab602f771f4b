from __future__ import annotations

import math
from datetime import datetime
from typing import Optional, Sequence

import numpy as np

from core.errors import EmptyPriceDataError
from core.models import DerivedStats, PriceSample
from core.price_series import find_current


def pct_deviation(value: float, mean: float) -> float:
    if mean == 0:
        return 0.0
    pct = (value - mean) / mean * 100.0
    return pct if math.isfinite(pct) else 0.0


def compute_stats(samples: Sequence[PriceSample], now: Optional[datetime] = None) -> DerivedStats:
    if not samples:
        raise EmptyPriceDataError()
    prices = np.asarray([s.price for s in samples], dtype=np.float64)
    mean = float(np.mean(prices))
    minimum = float(np.min(prices))
    maximum = float(np.max(prices))
    # Float summation can land the mean a hair outside [min, max] for equal prices.
    mean = min(max(mean, minimum), maximum)
    idx = find_current(samples, now)
    current = samples[idx] if idx is not None else None
    deviation = pct_deviation(current.price, mean) if current is not None else 0.0
    return DerivedStats(
        current=current,
        mean=mean,
        minimum=minimum,
        maximum=maximum,
        pct_deviation=deviation,
        count=len(samples),
    )
