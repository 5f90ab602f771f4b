from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from core.config import BEST_HOURS_COUNT
from core.models import PriceSample


def local_now() -> datetime:
    return datetime.now().astimezone()


def as_aware(dt: datetime) -> datetime:
    """Naive datetimes are taken as local wall-clock time."""
    if dt.tzinfo is None:
        return dt.astimezone()
    return dt


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        return as_aware(datetime.fromisoformat(text))
    except (ValueError, OverflowError, OSError):
        return None


def _parse_price(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price):
        return None
    return price


def parse_sample(raw: Any) -> PriceSample:
    if not isinstance(raw, Mapping):
        return PriceSample(price=0.0, start=None, end=None, has_price=False)
    price = _parse_price(raw.get("price"))
    start_raw = raw.get("startDate")
    end_raw = raw.get("endDate")
    return PriceSample(
        price=price if price is not None else 0.0,
        start=parse_timestamp(start_raw),
        end=parse_timestamp(end_raw),
        start_raw=start_raw if isinstance(start_raw, str) else "",
        end_raw=end_raw if isinstance(end_raw, str) else "",
        has_price=price is not None,
    )


def parse_samples(raw_list: Iterable[Any]) -> List[PriceSample]:
    return [parse_sample(raw) for raw in raw_list]


def sort_by_start(samples: Iterable[PriceSample]) -> List[PriceSample]:
    # Undated samples go last; sorted() is stable so their input order survives.
    return sorted(samples, key=lambda s: (s.start is None, s.start.timestamp() if s.start is not None else 0.0))


def sort_by_price(samples: Iterable[PriceSample]) -> List[PriceSample]:
    return sorted(samples, key=lambda s: s.price)


def cheapest_hours(samples: Iterable[PriceSample], count: int = BEST_HOURS_COUNT) -> List[PriceSample]:
    return sort_by_price(samples)[: max(0, int(count))]


def find_current(samples: Iterable[PriceSample], now: Optional[datetime] = None) -> Optional[int]:
    """Index of the first sample whose interval contains ``now``."""
    instant = as_aware(now) if now is not None else local_now()
    for idx, sample in enumerate(samples):
        if sample.contains(instant):
            return idx
    return None


def format_hour(sample: PriceSample) -> str:
    if sample.start is None:
        return ""
    return f"{sample.start.astimezone().hour:02d}:00"


def format_day_time(sample: PriceSample) -> str:
    if sample.start is None:
        return sample.start_raw or "-"
    return sample.start.astimezone().strftime("%d.%m. %H:%M")


def format_date(sample: PriceSample) -> str:
    if sample.start is None:
        return sample.start_raw or "-"
    return sample.start.astimezone().strftime("%d.%m.%Y")
