from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

import pandas as pd


@dataclass
class ColumnDefinition:
    """Lightweight schema descriptor used by table editors."""

    field: str
    label: str
    kind: str = "text"  # text | number | select | date
    default: Any = ""
    options: List[str] | None = None
    min_value: float | None = None
    step: float | None = None
    format: str | None = None
    help: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "label": self.label,
            "kind": self.kind,
            "default": self.default,
            "options": self.options or [],
            "min": self.min_value,
            "step": self.step,
            "format": self.format,
            "help": self.help,
        }


@dataclass
class TableModel:
    """Container for a table schema plus default rows."""

    name: str
    columns: List[ColumnDefinition]
    default_rows: List[dict[str, Any]] = field(default_factory=list)

    def create_default_df(self) -> pd.DataFrame:
        if self.default_rows:
            return pd.DataFrame(self.default_rows, columns=[col.field for col in self.columns])
        seed = {col.field: col.default for col in self.columns}
        return pd.DataFrame([seed])

    def rows_to_df(self, rows: List[dict[str, Any]]) -> pd.DataFrame:
        """Frame with every schema column present, missing cells filled with column defaults."""
        df = pd.DataFrame(rows or [])
        for col in self.columns:
            if col.field not in df.columns:
                df[col.field] = col.default
        return df

    def to_dict(self) -> dict[str, Any]:
        defaults = self.create_default_df().to_dict("records")
        return {
            "name": self.name,
            "columns": [col.to_dict() for col in self.columns],
            "defaults": defaults,
        }


def cell_text(row: dict[str, Any], key: str, default: str = "") -> str:
    value = row.get(key, default)
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return default
    return str(value).strip()


def cell_number(row: dict[str, Any], key: str, default: float = 0.0) -> float:
    value = row.get(key, default)
    if value is None or value == "" or (isinstance(value, float) and pd.isna(value)):
        return default
    return float(value)
