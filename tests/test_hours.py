import pytest

from hourly_rate.data_model import TimeBudget
from hourly_rate.engine import compute_billable_hours


def test_default_schedule_gives_1440_billable_hours():
    hours = compute_billable_hours(TimeBudget())

    assert TimeBudget().annual_working_days == 225
    assert hours.annual == pytest.approx(1440.0)
    assert hours.monthly == pytest.approx(120.0)


def test_time_off_beyond_capacity_collapses_to_zero():
    budget = TimeBudget(working_days_per_week=1, holidays=40, vacation_days=20, sick_days=0)

    assert budget.annual_working_days < 0
    assert compute_billable_hours(budget) == (0.0, 0.0)
    assert compute_billable_hours(budget, custom_hours_per_week=40) == (0.0, 0.0)


def test_week_based_path_uses_custom_hours():
    hours = compute_billable_hours(TimeBudget(), custom_hours_per_week=20)

    # 52 weeks minus 7 weeks off, 80% billable
    assert hours.annual == pytest.approx(20 * 45 * 0.8)


@pytest.mark.parametrize(
    "budget",
    [
        TimeBudget(),
        TimeBudget(working_days_per_week=4, hours_per_day=9.5, holidays=8, vacation_days=25, sick_days=3),
        TimeBudget(working_days_per_week=6, hours_per_day=6, non_billable_percent=0.35),
        TimeBudget(working_days_per_week=3, hours_per_day=7, holidays=0, vacation_days=7, sick_days=1),
    ],
)
def test_day_and_week_paths_agree_at_nominal_hours(budget):
    day_based = compute_billable_hours(budget)
    week_based = compute_billable_hours(budget, custom_hours_per_week=budget.nominal_hours_per_week)

    assert abs(week_based.annual - day_based.annual) <= 1e-9 * day_based.annual


def test_fully_non_billable_schedule_has_no_hours():
    assert compute_billable_hours(TimeBudget(non_billable_percent=1.0)).annual == 0.0


@pytest.mark.parametrize("hours_per_week", [float("nan"), float("inf")])
def test_non_finite_custom_hours_collapse_to_zero(hours_per_week):
    assert compute_billable_hours(TimeBudget(), custom_hours_per_week=hours_per_week) == (0.0, 0.0)
