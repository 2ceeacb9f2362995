from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any

from ..utils import new_id, parse_datetime, utcnow


@dataclass(frozen=True)
class MarketRate:
    """Hourly rate band observed on the market for a given role."""

    name: str
    min_rate: float
    max_rate: float
    average_rate: float = 0.0
    currency: str = "USD"
    region: str = ""
    source: str = ""
    notes: str = ""
    updated_at: dt.datetime = field(default_factory=utcnow)
    id: str = field(default_factory=new_id)
    sort_order: int = 0

    def position_in_range(self, rate: float) -> float:
        if self.max_rate <= self.min_rate:
            return 0.5
        return (rate - self.min_rate) / (self.max_rate - self.min_rate)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "min_rate": self.min_rate,
            "max_rate": self.max_rate,
            "average_rate": self.average_rate,
            "currency": self.currency,
            "region": self.region,
            "source": self.source,
            "notes": self.notes,
            "updated_at": self.updated_at.isoformat(),
            "sort_order": self.sort_order,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MarketRate":
        return cls(
            name=str(data.get("name", "")).strip(),
            min_rate=float(data.get("min_rate", 0.0) or 0.0),
            max_rate=float(data.get("max_rate", 0.0) or 0.0),
            average_rate=float(data.get("average_rate", 0.0) or 0.0),
            currency=str(data.get("currency") or "USD"),
            region=str(data.get("region") or ""),
            source=str(data.get("source") or ""),
            notes=str(data.get("notes") or ""),
            updated_at=parse_datetime(data.get("updated_at")) or utcnow(),
            id=str(data.get("id") or new_id()),
            sort_order=int(data.get("sort_order", 0) or 0),
        )
