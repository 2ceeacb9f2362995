from __future__ import annotations

import datetime as dt
import re
from typing import Iterable, NamedTuple

from ..data_model import CalculationResult, RateInputs, ScenarioRecord, TimeBudget
from ..utils import utcnow
from .calculator import calculate

DEFAULT_NAME = re.compile(r"^Scenario (\d+)$")


class ScenarioComparison(NamedTuple):
    base: CalculationResult
    scenario: CalculationResult
    rate_change: float

    def to_dict(self) -> dict:
        return {
            "base": self.base.to_dict(),
            "scenario": self.scenario.to_dict(),
            "rate_change": self.rate_change,
        }


def nominal_hours_per_week(time_budget: TimeBudget | None, fallback: float = 40.0) -> float:
    if time_budget is None:
        return fallback
    return time_budget.nominal_hours_per_week


def run_scenario(inputs: RateInputs, hours_per_week: float, extra_equipment_cost: float = 0.0) -> CalculationResult:
    return calculate(inputs, extra_equipment_cost=extra_equipment_cost, custom_hours_per_week=hours_per_week)


def rate_change(base: CalculationResult, scenario: CalculationResult) -> float:
    """Relative hourly-rate delta of ``scenario`` against ``base`` (0.1 == +10%)."""
    if base.hourly_rate == 0:
        return 0.0
    return (scenario.hourly_rate - base.hourly_rate) / base.hourly_rate


def compare_scenario(inputs: RateInputs, hours_per_week: float, extra_equipment_cost: float = 0.0) -> ScenarioComparison:
    base = calculate(inputs)
    scenario = run_scenario(inputs, hours_per_week, extra_equipment_cost)
    return ScenarioComparison(base, scenario, rate_change(base, scenario))


def build_scenario_record(
    name: str,
    hours_per_week: float,
    extra_equipment_cost: float,
    scenario_result: CalculationResult,
    existing_count: int = 0,
    created_at: dt.datetime | None = None,
) -> ScenarioRecord:
    """Compact snapshot of a scenario run.

    Only the hourly rate is stored, so replaying the record against later
    inputs may give a different rate.
    """
    label = (name or "").strip() or f"Scenario {existing_count + 1}"
    return ScenarioRecord(
        name=label,
        hours_per_week=hours_per_week,
        extra_equipment_cost=extra_equipment_cost,
        calculated_hourly_rate=scenario_result.hourly_rate,
        created_at=created_at or utcnow(),
    )


def default_name_index(records: Iterable[ScenarioRecord]) -> int:
    """Count to pass as ``existing_count`` so the next default name is unused."""
    records = list(records)
    highest = 0
    for record in records:
        match = DEFAULT_NAME.match(record.name)
        if match:
            highest = max(highest, int(match.group(1)))
    return max(len(records), highest)
