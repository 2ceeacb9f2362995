# engine/storage.py
import math
from typing import Any, Dict, List

import pandas as pd


def sanitize_json_compat(value: Any):
    """Replace NaN and infinities with None so the value survives strict JSON encoding."""
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, dict):
        return {key: sanitize_json_compat(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_json_compat(item) for item in value]
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    return value


def sanitize_records(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [sanitize_json_compat(record) for record in records]


def frame_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    if df.empty:
        return []
    return sanitize_records(df.to_dict(orient="records"))
