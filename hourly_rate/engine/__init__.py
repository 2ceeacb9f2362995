from .analytics import (
    TIME_PERIODS,
    aggregate_period,
    average_rate,
    filter_period,
    history_frame,
    market_position,
    rate_change_percent,
    summarize_history,
)
from .calculator import calculate, synthesize_rate
from .costs import CostTotals, aggregate_costs
from .hours import BillableHours, compute_billable_hours
from .scenario import (
    ScenarioComparison,
    build_scenario_record,
    default_name_index,
    compare_scenario,
    nominal_hours_per_week,
    rate_change,
    run_scenario,
)
from .state import CollectionState, HistoryLedger, RateRepository, ScenarioBook, SingletonState, SnapshotState
from .storage import frame_to_records, sanitize_json_compat, sanitize_records
from .tax import TaxGrossUp, gross_up_for_tax

__all__ = [
    "TIME_PERIODS",
    "BillableHours",
    "CollectionState",
    "CostTotals",
    "HistoryLedger",
    "RateRepository",
    "ScenarioBook",
    "ScenarioComparison",
    "SingletonState",
    "SnapshotState",
    "TaxGrossUp",
    "aggregate_costs",
    "aggregate_period",
    "average_rate",
    "build_scenario_record",
    "calculate",
    "compare_scenario",
    "compute_billable_hours",
    "default_name_index",
    "filter_period",
    "frame_to_records",
    "gross_up_for_tax",
    "history_frame",
    "market_position",
    "nominal_hours_per_week",
    "rate_change",
    "rate_change_percent",
    "run_scenario",
    "sanitize_json_compat",
    "sanitize_records",
    "summarize_history",
    "synthesize_rate",
]
