from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from ..data_model import HistoryEntry, MarketRate
from ..utils import as_utc, utcnow

TIME_PERIODS: Dict[str, Optional[int]] = {
    "1M": 30,
    "3M": 90,
    "6M": 180,
    "1Y": 365,
    "ALL": None,
}

HISTORY_COLUMNS = [
    "Date",
    "CalendarYear",
    "MonthInYear",
    "HourlyRate",
    "DailyRate",
    "MonthlyGross",
    "NetIncome",
    "Tax",
    "FixedCosts",
    "Amortization",
    "SocialNet",
    "BillableHours",
    "Currency",
    "Notes",
]

REQUIRED_COLUMNS = {"Date", "CalendarYear", "MonthInYear"}


def _chronological(entries: Iterable[HistoryEntry]) -> List[HistoryEntry]:
    return sorted(entries, key=lambda entry: as_utc(entry.date))


def filter_period(
    entries: Iterable[HistoryEntry],
    period: str = "ALL",
    now: Optional[dt.datetime] = None,
) -> List[HistoryEntry]:
    key = (period or "ALL").upper()
    if key not in TIME_PERIODS:
        raise ValueError(f"Unknown period '{period}'. Expected one of: {', '.join(TIME_PERIODS)}")
    ordered = _chronological(entries)
    days = TIME_PERIODS[key]
    if days is None:
        return ordered
    cutoff = as_utc(now) if now else utcnow()
    cutoff = cutoff - dt.timedelta(days=days)
    return [entry for entry in ordered if as_utc(entry.date) >= cutoff]


def average_rate(entries: Sequence[HistoryEntry]) -> float:
    if not entries:
        return 0.0
    return sum(entry.hourly_rate for entry in entries) / len(entries)


def rate_change_percent(entries: Iterable[HistoryEntry]) -> float:
    ordered = _chronological(entries)
    if len(ordered) < 2:
        return 0.0
    first = ordered[0].hourly_rate
    last = ordered[-1].hourly_rate
    if first <= 0:
        return 0.0
    return (last - first) / first * 100.0


def history_frame(entries: Iterable[HistoryEntry]) -> pd.DataFrame:
    rows = []
    for entry in _chronological(entries):
        result = entry.result
        date = as_utc(entry.date)
        rows.append(
            {
                "Date": pd.Timestamp(date),
                "CalendarYear": date.year,
                "MonthInYear": date.month,
                "HourlyRate": result.hourly_rate,
                "DailyRate": result.daily_rate,
                "MonthlyGross": result.monthly_gross_income,
                "NetIncome": result.net_income_component,
                "Tax": result.tax_component,
                "FixedCosts": result.fixed_costs_component,
                "Amortization": result.amortization_component,
                "SocialNet": result.social_net_component,
                "BillableHours": result.annual_billable_hours,
                "Currency": entry.currency,
                "Notes": entry.notes,
            }
        )
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)


def _prepare(df: pd.DataFrame) -> pd.DataFrame:
    missing = REQUIRED_COLUMNS.difference(df.columns)
    if missing:
        raise KeyError(f"Missing required columns: {', '.join(sorted(missing))}")
    return df.sort_values("Date").copy()


def aggregate_period(df: pd.DataFrame, freq: str = "M") -> pd.DataFrame:
    """Collapse history snapshots to the last one per month, quarter or year."""
    freq = (freq or "M").upper()
    if freq not in {"M", "Q", "Y"}:
        raise ValueError(f"Unknown frequency '{freq}'. Expected M, Q or Y")
    if df.empty:
        return df

    df = _prepare(df)
    year = df["CalendarYear"].astype(int)
    month = df["MonthInYear"].astype(int)

    if freq == "Q":
        quarter = (month - 1) // 3
        df["PeriodValue"] = year * 4 + quarter
        df["Period"] = year.astype(str) + " Q" + (quarter + 1).astype(str)
    elif freq == "Y":
        df["PeriodValue"] = year
        df["Period"] = year.astype(str)
    else:
        df["PeriodValue"] = year * 12 + month - 1
        df["Period"] = year.astype(str) + "-" + month.map("{:02d}".format)

    return df.groupby("PeriodValue", as_index=False).last()


def summarize_history(entries: Iterable[HistoryEntry]) -> Dict[str, Any]:
    ordered = _chronological(entries)
    rates = [entry.hourly_rate for entry in ordered]
    return {
        "entries": len(ordered),
        "average_rate": average_rate(ordered),
        "rate_change_percent": rate_change_percent(ordered),
        "latest_rate": rates[-1] if rates else 0.0,
        "min_rate": min(rates) if rates else 0.0,
        "max_rate": max(rates) if rates else 0.0,
    }


def _position_against(rate: float, market: MarketRate) -> float:
    low, high = market.min_rate, market.max_rate
    if high <= low:
        if low <= 0:
            return 0.5
        return min(rate / low * 0.5, 1.0)
    if rate < low:
        return rate / low * 0.4 if low > 0 else 0.0
    if rate > high:
        if high <= 0:
            return 1.0
        return 0.6 + (min(rate / high, 2.0) - 1.0) * 0.4
    return 0.4 + (rate - low) / (high - low) * 0.2


def market_position(rate: float, market_rates: Sequence[MarketRate]) -> float:
    """Where ``rate`` sits against observed market bands, 0 (cheapest) to 1.

    Each band maps below-minimum rates into [0, 0.4), in-band rates into
    [0.4, 0.6] and above-maximum rates into (0.6, 1.0].
    """
    if not market_rates:
        return 0.5
    scores = [_position_against(rate, market) for market in market_rates]
    mean = sum(scores) / len(scores)
    return max(0.0, min(1.0, mean))
