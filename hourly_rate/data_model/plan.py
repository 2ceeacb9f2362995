# data_model/plan.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .costs import FixedCost
from .equipment import EquipmentItem
from .income import IncomeTarget, SocialNet, TimeBudget


@dataclass(frozen=True)
class RateInputs:
    income_target: IncomeTarget | None = None
    time_budget: TimeBudget | None = None
    equipment: Tuple[EquipmentItem, ...] = field(default_factory=tuple)
    fixed_costs: Tuple[FixedCost, ...] = field(default_factory=tuple)
    social_net: SocialNet | None = None

    @property
    def is_complete(self) -> bool:
        return self.income_target is not None and self.time_budget is not None

    @property
    def currency(self) -> str:
        return self.income_target.currency if self.income_target else "USD"
