from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

WEEKS_PER_YEAR = 52


@dataclass(frozen=True)
class TaxRegime:
    id: str
    name: str
    rate: float
    description: str


TAX_REGIMES: Dict[str, TaxRegime] = {
    regime.id: regime
    for regime in (
        TaxRegime("NPD", "Self-Employed (NPD)", 0.06, "6% flat rate for self-employed individuals"),
        TaxRegime("IP", "Individual Entrepreneur (IP)", 0.15, "15% simplified taxation system"),
        TaxRegime("PATENT", "Patent System", 0.04, "4% fixed patent-based taxation"),
        TaxRegime("STANDARD", "Standard Income Tax", 0.13, "13% standard personal income tax"),
        TaxRegime("PROGRESSIVE", "Progressive Tax", 0.22, "22% for higher income brackets"),
        TaxRegime("CORPORATE", "Small Business", 0.20, "20% corporate tax rate"),
        TaxRegime("CUSTOM", "Custom Rate", 0.0, "Enter your own tax rate"),
    )
}


@dataclass(frozen=True)
class IncomeTarget:
    """Desired monthly take-home pay and the flat tax applied on top of it."""

    net_income: float = 0.0
    tax_rate: float = 0.06
    currency: str = "USD"
    tax_regime: str = "NPD"

    @classmethod
    def for_regime(cls, regime_id: str, net_income: float, currency: str = "USD") -> "IncomeTarget":
        regime = TAX_REGIMES.get(regime_id.upper())
        if regime is None:
            raise ValueError(f"Unknown tax regime: {regime_id}")
        return cls(net_income=net_income, tax_rate=regime.rate, currency=currency, tax_regime=regime.id)

    @property
    def annual_net_income(self) -> float:
        return self.net_income * 12.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TimeBudget:
    working_days_per_week: int = 5
    hours_per_day: float = 8.0
    holidays: int = 10
    vacation_days: int = 20
    sick_days: int = 5
    non_billable_percent: float = 0.2

    @property
    def days_off(self) -> int:
        return self.holidays + self.vacation_days + self.sick_days

    @property
    def annual_working_days(self) -> int:
        # Negative when time off exceeds capacity; callers clamp.
        return self.working_days_per_week * WEEKS_PER_YEAR - self.days_off

    @property
    def nominal_hours_per_week(self) -> float:
        return self.working_days_per_week * self.hours_per_day

    @property
    def billable_share(self) -> float:
        return 1.0 - self.non_billable_percent

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SocialNet:
    """Savings targets, in months of net income, funded over ``target_saving_months``."""

    sick_fund_months: float = 1.0
    safety_net_months: float = 3.0
    target_saving_months: int = 12

    @property
    def total_months_needed(self) -> float:
        return self.sick_fund_months + self.safety_net_months

    def monthly_contribution(self, monthly_net_income: float) -> float:
        if self.target_saving_months <= 0:
            return 0.0
        return self.total_months_needed * monthly_net_income / self.target_saving_months

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
