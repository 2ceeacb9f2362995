from __future__ import annotations

from ..data_model import EMPTY_RESULT, CalculationResult, RateInputs, TimeBudget
from .costs import CostTotals, aggregate_costs
from .hours import BillableHours, compute_billable_hours
from .tax import TaxGrossUp, gross_up_for_tax

# A minimum engagement is one working week.
MINIMUM_PROJECT_DAYS = 5


def synthesize_rate(
    time_budget: TimeBudget,
    hours: BillableHours,
    costs: CostTotals,
    tax: TaxGrossUp,
) -> CalculationResult:
    """Combine the pipeline stages into rates and monthly components."""
    if hours.annual <= 0:
        return EMPTY_RESULT

    total_annual_required = tax.gross_from_net + costs.total
    hourly_rate = total_annual_required / hours.annual
    daily_rate = hourly_rate * time_budget.hours_per_day * time_budget.billable_share

    return CalculationResult(
        hourly_rate=hourly_rate,
        daily_rate=daily_rate,
        minimum_project_rate=daily_rate * MINIMUM_PROJECT_DAYS,
        monthly_gross_income=total_annual_required / 12.0,
        annual_gross_income=total_annual_required,
        net_income_component=tax.annual_net_income / 12.0,
        tax_component=tax.tax_amount / 12.0,
        fixed_costs_component=costs.annual_fixed_costs / 12.0,
        amortization_component=costs.annual_amortization / 12.0,
        social_net_component=costs.annual_social_net / 12.0,
        annual_billable_hours=hours.annual,
        monthly_billable_hours=hours.monthly,
    )


def calculate(
    inputs: RateInputs,
    extra_equipment_cost: float = 0.0,
    custom_hours_per_week: float | None = None,
) -> CalculationResult:
    """Minimum rate for ``inputs``; the empty result when income or schedule is missing."""
    income = inputs.income_target
    time_budget = inputs.time_budget
    if income is None or time_budget is None:
        return EMPTY_RESULT

    hours = compute_billable_hours(time_budget, custom_hours_per_week)
    if hours.annual <= 0:
        return EMPTY_RESULT

    tax = gross_up_for_tax(income)
    costs = aggregate_costs(
        inputs.equipment,
        inputs.fixed_costs,
        inputs.social_net,
        monthly_net_income=income.net_income,
        extra_equipment_cost=extra_equipment_cost,
    )
    return synthesize_rate(time_budget, hours, costs, tax)
