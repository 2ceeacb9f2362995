from __future__ import annotations

import math
from typing import NamedTuple

from ..data_model import TimeBudget
from ..data_model.income import WEEKS_PER_YEAR


class BillableHours(NamedTuple):
    annual: float
    monthly: float


NO_HOURS = BillableHours(0.0, 0.0)


def _day_based_hours(time_budget: TimeBudget) -> float:
    total_hours = time_budget.annual_working_days * time_budget.hours_per_day
    return total_hours * time_budget.billable_share


def _week_based_hours(time_budget: TimeBudget, hours_per_week: float) -> float:
    if time_budget.working_days_per_week <= 0:
        return 0.0
    weeks_off = time_budget.days_off / time_budget.working_days_per_week
    working_weeks = WEEKS_PER_YEAR - weeks_off
    return hours_per_week * working_weeks * time_budget.billable_share


def compute_billable_hours(time_budget: TimeBudget, custom_hours_per_week: float | None = None) -> BillableHours:
    """Annual and monthly invoiceable hours for a schedule.

    The default path counts working days; a scenario override counts working
    weeks at ``custom_hours_per_week``. The two are kept as separate formulas.
    Non-positive or non-finite totals collapse to zero hours.
    """
    if custom_hours_per_week is None:
        annual = _day_based_hours(time_budget)
    else:
        annual = _week_based_hours(time_budget, custom_hours_per_week)
    if not math.isfinite(annual) or annual <= 0:
        return NO_HOURS
    return BillableHours(annual, annual / 12.0)
