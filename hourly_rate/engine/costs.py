from __future__ import annotations

from typing import Iterable, NamedTuple

from ..data_model import EquipmentItem, FixedCost, SocialNet

# Extra scenario equipment is always written off over three years.
EXTRA_EQUIPMENT_LIFESPAN_YEARS = 3


class CostTotals(NamedTuple):
    annual_fixed_costs: float
    annual_amortization: float
    annual_social_net: float

    @property
    def total(self) -> float:
        return self.annual_fixed_costs + self.annual_amortization + self.annual_social_net


def annual_fixed_costs(fixed_costs: Iterable[FixedCost]) -> float:
    return sum(cost.annual_amount for cost in fixed_costs)


def annual_amortization(equipment: Iterable[EquipmentItem], extra_equipment_cost: float = 0.0) -> float:
    base = sum(item.monthly_amortization for item in equipment) * 12.0
    return base + extra_equipment_cost / EXTRA_EQUIPMENT_LIFESPAN_YEARS


def annual_social_net(social_net: SocialNet | None, monthly_net_income: float) -> float:
    if social_net is None:
        return 0.0
    return social_net.monthly_contribution(monthly_net_income) * 12.0


def aggregate_costs(
    equipment: Iterable[EquipmentItem],
    fixed_costs: Iterable[FixedCost],
    social_net: SocialNet | None,
    monthly_net_income: float,
    extra_equipment_cost: float = 0.0,
) -> CostTotals:
    return CostTotals(
        annual_fixed_costs=annual_fixed_costs(fixed_costs),
        annual_amortization=annual_amortization(equipment, extra_equipment_cost),
        annual_social_net=annual_social_net(social_net, monthly_net_income),
    )
