from __future__ import annotations

import argparse
from datetime import datetime
from typing import List, Optional

from core.config import API_URL, BEST_HOURS_COUNT, REQUEST_TIMEOUT, UNIT
from core.errors import PriceDataError
from core.logger import log
from core.models import DerivedStats, PriceSample
from core.price_fetch import load_price_series
from core.price_series import as_aware, cheapest_hours, format_day_time, sort_by_start
from core.price_stats import compute_stats


def _parse_now(val: str) -> datetime:
    v = val.strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    return as_aware(datetime.fromisoformat(v))


def format_report(samples: List[PriceSample], stats: DerivedStats, best_count: int = BEST_HOURS_COUNT) -> List[str]:
    lines: List[str] = []
    if stats.current is not None:
        arrow = "down" if stats.pct_deviation <= 0 else "up"
        lines.append(
            f"current={stats.current.price:.2f} {UNIT} "
            f"({abs(stats.pct_deviation):.1f}% {arrow} from average)"
        )
    else:
        lines.append("current=n/a")
    lines.append(f"average={stats.mean:.2f} {UNIT}")
    lines.append(f"min={stats.minimum:.2f} {UNIT}")
    lines.append(f"max={stats.maximum:.2f} {UNIT}")
    lines.append("")
    lines.append("best times:")
    for sample in cheapest_hours(samples, best_count):
        lines.append(f"  {format_day_time(sample)}  {sample.price:.2f} {UNIT}")
    lines.append("")
    lines.append("all hours:")
    for sample in sort_by_start(samples):
        status = "cheap" if sample.price < stats.mean else "expensive"
        lines.append(f"  {format_day_time(sample)}  {sample.price:6.2f}  {status}")
    return lines


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Headless hourly spot price report (no UI).")
    ap.add_argument("--url", default=API_URL, help=f"Price API endpoint (default: {API_URL})")
    ap.add_argument("--timeout", type=float, default=REQUEST_TIMEOUT, help="Request timeout in seconds")
    ap.add_argument("--now", default=None, help="Evaluation instant as ISO date/time (default: current time)")
    ap.add_argument("--best", type=int, default=BEST_HOURS_COUNT, help="Number of cheapest hours to list")
    args = ap.parse_args(argv)

    try:
        now = _parse_now(args.now) if args.now else None
    except ValueError:
        ap.error(f"invalid --now value: {args.now}")
    try:
        samples = load_price_series(args.url, args.timeout)
        stats = compute_stats(samples, now)
    except PriceDataError as exc:
        log.error("%s", exc)
        print(f"error: {exc}")
        return 1

    for line in format_report(samples, stats, args.best):
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
