from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, List

import pandas as pd

from ..utils import months_between, new_id, parse_date
from .base import ColumnDefinition, TableModel, cell_number, cell_text

DEFAULT_LIFESPAN_YEARS = 3


def default_equipment_rows() -> List[dict[str, Any]]:
    return [
        {"Id": "", "Name": "Laptop", "Cost": 2000.0, "Lifespan (years)": 3, "Purchase Date": ""},
        {"Id": "", "Name": "Monitor", "Cost": 400.0, "Lifespan (years)": 5, "Purchase Date": ""},
    ]


class EquipmentTableModel(TableModel):
    """Schema + defaults for equipment rows."""

    def __init__(self) -> None:
        columns = [
            ColumnDefinition("Id", "Id", default="", help="Stable identifier, blank for new rows"),
            ColumnDefinition("Name", "Name"),
            ColumnDefinition(
                "Cost",
                "Cost",
                kind="number",
                default=0.0,
                min_value=0.0,
                step=100.0,
                format="%.2f",
            ),
            ColumnDefinition(
                "Lifespan (years)",
                "Lifespan (years)",
                kind="number",
                default=DEFAULT_LIFESPAN_YEARS,
                min_value=0.0,
                step=1.0,
                help="0 disables amortization",
            ),
            ColumnDefinition("Purchase Date", "Purchase Date", kind="date", default=""),
        ]
        super().__init__("equipment", columns, default_equipment_rows())


@dataclass(frozen=True)
class EquipmentItem:
    name: str
    cost: float
    lifespan_years: int = DEFAULT_LIFESPAN_YEARS
    purchase_date: dt.date | None = None
    id: str = field(default_factory=new_id)
    sort_order: int = 0

    @property
    def lifespan_months(self) -> int:
        return max(0, self.lifespan_years) * 12

    @property
    def monthly_amortization(self) -> float:
        if self.lifespan_years <= 0:
            return 0.0
        return self.cost / (self.lifespan_years * 12)

    def remaining_value(self, as_of: dt.date | None = None) -> float:
        """Straight-line book value left at ``as_of`` (today by default)."""
        if self.purchase_date is None or self.lifespan_years <= 0:
            return self.cost
        as_of = as_of or dt.date.today()
        elapsed = max(0, months_between(self.purchase_date, as_of))
        remaining = max(0, self.lifespan_months - elapsed)
        return self.cost * remaining / self.lifespan_months

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "cost": self.cost,
            "lifespan_years": self.lifespan_years,
            "purchase_date": self.purchase_date.isoformat() if self.purchase_date else None,
            "sort_order": self.sort_order,
            "monthly_amortization": self.monthly_amortization,
            "remaining_value": self.remaining_value(),
        }


def dataframe_to_equipment(df: pd.DataFrame) -> List[EquipmentItem]:
    items: List[EquipmentItem] = []
    for row in df.to_dict("records"):
        name = cell_text(row, "Name")
        if not name:
            continue
        cost = cell_number(row, "Cost")
        lifespan = int(cell_number(row, "Lifespan (years)", DEFAULT_LIFESPAN_YEARS))
        if cost < 0:
            raise ValueError(f"Equipment '{name}' has a negative cost.")
        if lifespan < 0:
            raise ValueError(f"Equipment '{name}' has a negative lifespan.")
        items.append(
            EquipmentItem(
                name=name,
                cost=cost,
                lifespan_years=lifespan,
                purchase_date=parse_date(cell_text(row, "Purchase Date")),
                id=cell_text(row, "Id") or new_id(),
            )
        )
    return items
