import datetime as dt

import pytest

from hourly_rate.data_model import RateInputs, ScenarioRecord
from hourly_rate.engine import (
    build_scenario_record,
    calculate,
    compare_scenario,
    default_name_index,
    nominal_hours_per_week,
    rate_change,
    run_scenario,
)


def test_nominal_scenario_matches_baseline_within_bound(full_inputs):
    base = calculate(full_inputs)
    scenario = run_scenario(full_inputs, hours_per_week=nominal_hours_per_week(full_inputs.time_budget))

    assert abs(scenario.hourly_rate - base.hourly_rate) <= 1e-9 * base.hourly_rate
    assert abs(rate_change(base, scenario)) <= 1e-9


def test_fewer_hours_raise_the_rate(full_inputs):
    comparison = compare_scenario(full_inputs, hours_per_week=30)

    assert comparison.scenario.hourly_rate > comparison.base.hourly_rate
    # Same annual requirement spread over 3/4 of the hours
    assert comparison.rate_change == pytest.approx(40 / 30 - 1)


def test_extra_equipment_is_amortized_over_three_years(full_inputs):
    base = calculate(full_inputs)
    scenario = run_scenario(full_inputs, hours_per_week=40, extra_equipment_cost=3600.0)

    assert scenario.annual_gross_income - base.annual_gross_income == pytest.approx(1200.0)


def test_rate_change_against_empty_base_is_zero(full_inputs):
    assert rate_change(calculate(RateInputs()), calculate(full_inputs)) == 0.0


def test_scenario_record_default_name_and_snapshot(full_inputs):
    comparison = compare_scenario(full_inputs, hours_per_week=32, extra_equipment_cost=500.0)
    created = dt.datetime(2025, 3, 1, 9, 30, tzinfo=dt.timezone.utc)

    record = build_scenario_record("  ", 32, 500.0, comparison.scenario, existing_count=2, created_at=created)

    assert record.name == "Scenario 3"
    assert record.calculated_hourly_rate == comparison.scenario.hourly_rate
    assert record.created_at == created
    assert record.to_dict()["created_at"] == "2025-03-01T09:30:00+00:00"


def test_scenario_record_dict_round_trip(full_inputs):
    record = build_scenario_record("Part time", 24, 0.0, run_scenario(full_inputs, 24))

    restored = ScenarioRecord.from_dict(record.to_dict())

    assert restored == record


def test_default_name_index_skips_names_in_use(full_inputs):
    result = run_scenario(full_inputs, 40)
    records = [
        build_scenario_record("", 40, 0.0, result, existing_count=1),
        build_scenario_record("Custom", 40, 0.0, result),
    ]

    assert records[0].name == "Scenario 2"
    assert default_name_index(records) == 2
    assert default_name_index([]) == 0
    assert build_scenario_record("", 40, 0.0, result, existing_count=default_name_index(records)).name == "Scenario 3"
