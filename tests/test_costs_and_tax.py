import datetime as dt

import pytest

from hourly_rate.data_model import EquipmentItem, FixedCost, IncomeTarget, SocialNet
from hourly_rate.engine import aggregate_costs, gross_up_for_tax


def test_zero_lifespan_equipment_is_not_amortized():
    item = EquipmentItem(name="Desk", cost=900.0, lifespan_years=0)

    assert item.monthly_amortization == 0.0
    assert item.remaining_value(dt.date(2030, 1, 1)) == 900.0


def test_remaining_value_declines_linearly():
    item = EquipmentItem(name="Laptop", cost=3600.0, lifespan_years=3, purchase_date=dt.date(2024, 1, 15))

    assert item.monthly_amortization == pytest.approx(100.0)
    assert item.remaining_value(dt.date(2024, 1, 20)) == pytest.approx(3600.0)
    assert item.remaining_value(dt.date(2025, 1, 15)) == pytest.approx(2400.0)
    assert item.remaining_value(dt.date(2025, 1, 14)) == pytest.approx(2500.0)
    assert item.remaining_value(dt.date(2030, 1, 1)) == 0.0


def test_aggregate_costs_sums_every_category():
    totals = aggregate_costs(
        equipment=[EquipmentItem(name="Laptop", cost=3600.0, lifespan_years=3)],
        fixed_costs=[FixedCost(name="Rent", amount=250.0), FixedCost(name="IDE", amount=50.0)],
        social_net=SocialNet(sick_fund_months=1, safety_net_months=3, target_saving_months=12),
        monthly_net_income=3000.0,
        extra_equipment_cost=1500.0,
    )

    assert totals.annual_fixed_costs == pytest.approx(3600.0)
    assert totals.annual_amortization == pytest.approx(1200.0 + 500.0)
    assert totals.annual_social_net == pytest.approx(12000.0)
    assert totals.total == pytest.approx(3600.0 + 1700.0 + 12000.0)


def test_social_net_without_saving_period_contributes_nothing():
    social_net = SocialNet(target_saving_months=0)

    assert social_net.monthly_contribution(5000.0) == 0.0
    assert aggregate_costs([], [], social_net, 5000.0).total == 0.0


def test_gross_up_keeps_net_after_tax():
    tax = gross_up_for_tax(IncomeTarget(net_income=3000.0, tax_rate=0.06))

    assert tax.annual_net_income == 36000.0
    assert tax.gross_from_net == pytest.approx(38297.87, abs=0.01)
    assert tax.gross_from_net - tax.tax_amount == pytest.approx(36000.0)
    assert tax.tax_amount == pytest.approx(tax.gross_from_net * 0.06)


def test_tax_regime_lookup():
    target = IncomeTarget.for_regime("patent", 2000.0, currency="EUR")

    assert target.tax_rate == 0.04
    assert target.tax_regime == "PATENT"
    with pytest.raises(ValueError):
        IncomeTarget.for_regime("UNKNOWN", 2000.0)
