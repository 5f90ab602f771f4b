from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PriceSample:
    price: float
    start: Optional[datetime]
    end: Optional[datetime]
    start_raw: str = ""
    end_raw: str = ""
    # False when the record had no usable price and 0.0 was substituted.
    has_price: bool = True

    def contains(self, instant: datetime) -> bool:
        if self.start is None or self.end is None:
            return False
        return self.start <= instant < self.end


@dataclass(frozen=True)
class DerivedStats:
    current: Optional[PriceSample]
    mean: float
    minimum: float
    maximum: float
    pct_deviation: float
    count: int

    @property
    def current_price(self) -> Optional[float]:
        if self.current is None:
            return None
        return self.current.price

    @property
    def is_good_time(self) -> bool:
        return self.current is not None and self.current.price < self.mean
