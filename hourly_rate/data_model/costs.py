from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

import pandas as pd

from ..utils import new_id
from .base import ColumnDefinition, TableModel, cell_number, cell_text

COST_CATEGORIES: Dict[str, str] = {
    "rent": "Rent / Workspace",
    "utilities": "Utilities",
    "internet": "Internet & Phone",
    "software": "Software",
    "subscriptions": "Subscriptions",
    "insurance": "Insurance",
    "transport": "Transportation",
    "education": "Education & Training",
    "other": "Other",
}


def _fixed_cost_defaults() -> List[dict[str, Any]]:
    return [
        {"Id": "", "Name": "Coworking Desk", "Category": "rent", "Monthly Amount": 250.0},
        {"Id": "", "Name": "Software Licenses", "Category": "software", "Monthly Amount": 60.0},
    ]


class FixedCostTableModel(TableModel):
    def __init__(self) -> None:
        columns = [
            ColumnDefinition("Id", "Id", default="", help="Stable identifier, blank for new rows"),
            ColumnDefinition("Name", "Name"),
            ColumnDefinition(
                "Category",
                "Category",
                kind="select",
                default="other",
                options=list(COST_CATEGORIES),
            ),
            ColumnDefinition(
                "Monthly Amount",
                "Monthly Amount",
                kind="number",
                default=0.0,
                min_value=0.0,
                step=10.0,
                format="%.2f",
            ),
        ]
        super().__init__("fixed_costs", columns, _fixed_cost_defaults())


@dataclass(frozen=True)
class FixedCost:
    name: str
    amount: float
    category: str = "other"
    id: str = field(default_factory=new_id)
    sort_order: int = 0

    @property
    def category_name(self) -> str:
        return COST_CATEGORIES.get(self.category, COST_CATEGORIES["other"])

    @property
    def annual_amount(self) -> float:
        return self.amount * 12.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "amount": self.amount,
            "category": self.category,
            "category_name": self.category_name,
            "sort_order": self.sort_order,
        }


def dataframe_to_fixed_costs(df: pd.DataFrame) -> List[FixedCost]:
    rows: List[FixedCost] = []
    for row in df.to_dict("records"):
        name = cell_text(row, "Name")
        if not name:
            continue
        amount = cell_number(row, "Monthly Amount")
        if amount < 0:
            raise ValueError(f"Fixed cost '{name}' has a negative amount.")
        category = cell_text(row, "Category", "other").lower()
        rows.append(
            FixedCost(
                name=name,
                amount=amount,
                category=category if category in COST_CATEGORIES else "other",
                id=cell_text(row, "Id") or new_id(),
            )
        )
    return rows
