from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass, field, fields
from typing import Any, List

from ..utils import new_id, parse_datetime, utcnow

BREAKDOWN_LABELS = (
    ("net_income_component", "Net Income"),
    ("tax_component", "Taxes"),
    ("fixed_costs_component", "Fixed Costs"),
    ("amortization_component", "Equipment"),
    ("social_net_component", "Safety Net"),
)


@dataclass(frozen=True)
class BreakdownItem:
    name: str
    value: float
    percentage: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CalculationResult:
    """Output of one pass through the rate pipeline.

    Component values are monthly amounts; ``annual_gross_income`` is the total
    annual amount the rate has to cover.
    """

    hourly_rate: float = 0.0
    daily_rate: float = 0.0
    minimum_project_rate: float = 0.0
    monthly_gross_income: float = 0.0
    annual_gross_income: float = 0.0
    net_income_component: float = 0.0
    tax_component: float = 0.0
    fixed_costs_component: float = 0.0
    amortization_component: float = 0.0
    social_net_component: float = 0.0
    annual_billable_hours: float = 0.0
    monthly_billable_hours: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self == EMPTY_RESULT

    @property
    def components_total(self) -> float:
        return sum(getattr(self, attr) for attr, _ in BREAKDOWN_LABELS)

    @property
    def breakdown(self) -> List[BreakdownItem]:
        total = self.components_total
        if total <= 0:
            return []
        return [
            BreakdownItem(name=label, value=getattr(self, attr), percentage=getattr(self, attr) / total)
            for attr, label in BREAKDOWN_LABELS
        ]

    def to_dict(self, include_breakdown: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = asdict(self)
        if include_breakdown:
            payload["breakdown"] = [item.to_dict() for item in self.breakdown]
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CalculationResult":
        values = {}
        for item in fields(cls):
            raw = data.get(item.name, 0.0)
            values[item.name] = float(raw) if raw is not None else 0.0
        return cls(**values)


EMPTY_RESULT = CalculationResult()


@dataclass(frozen=True)
class ScenarioRecord:
    """Named what-if variant. Only the resulting hourly rate is kept."""

    name: str
    hours_per_week: float = 40.0
    extra_equipment_cost: float = 0.0
    calculated_hourly_rate: float = 0.0
    created_at: dt.datetime = field(default_factory=utcnow)
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "hours_per_week": self.hours_per_week,
            "extra_equipment_cost": self.extra_equipment_cost,
            "calculated_hourly_rate": self.calculated_hourly_rate,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScenarioRecord":
        return cls(
            name=str(data.get("name", "")),
            hours_per_week=float(data.get("hours_per_week", 40.0)),
            extra_equipment_cost=float(data.get("extra_equipment_cost", 0.0) or 0.0),
            calculated_hourly_rate=float(data.get("calculated_hourly_rate", 0.0) or 0.0),
            created_at=parse_datetime(data.get("created_at")) or utcnow(),
            id=str(data.get("id") or new_id()),
        )


@dataclass(frozen=True)
class HistoryEntry:
    """Point-in-time copy of a calculation, never recomputed after it is stored."""

    result: CalculationResult
    date: dt.datetime = field(default_factory=utcnow)
    currency: str = "USD"
    notes: str = ""
    id: str = field(default_factory=new_id)

    @property
    def hourly_rate(self) -> float:
        return self.result.hourly_rate

    @property
    def total_costs(self) -> float:
        r = self.result
        return r.tax_component + r.fixed_costs_component + r.amortization_component + r.social_net_component

    def to_dict(self) -> dict[str, Any]:
        payload = {"id": self.id, "date": self.date.isoformat(), "currency": self.currency, "notes": self.notes}
        payload.update(self.result.to_dict(include_breakdown=False))
        payload["total_costs"] = self.total_costs
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        return cls(
            result=CalculationResult.from_dict(data),
            date=parse_datetime(data.get("date")) or utcnow(),
            currency=str(data.get("currency") or "USD"),
            notes=str(data.get("notes") or ""),
            id=str(data.get("id") or new_id()),
        )
